"""Custom exception classes for the application"""

from typing import Optional, Dict, Any


class BaseAPIException(Exception):
    """Base exception for all API errors"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# Authentication Errors
class AuthenticationError(BaseAPIException):
    """Base authentication error"""
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status_code=401)


class InvalidCredentialsError(AuthenticationError):
    """Bad email/password or disabled account"""
    def __init__(self):
        super().__init__("Invalid credentials")


class TokenInvalidError(AuthenticationError):
    """JWT token is malformed, expired or signed with the wrong secret"""
    def __init__(self):
        super().__init__("Invalid token")


class TokenRevokedError(AuthenticationError):
    """Refresh token unknown, revoked or expired in storage"""
    def __init__(self):
        super().__init__("Invalid refresh")


# Authorization Errors
class AuthorizationError(BaseAPIException):
    """Insufficient permissions"""
    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, status_code=403)


# Resource Errors
class ResourceNotFoundError(BaseAPIException):
    """Resource not found"""
    def __init__(self, resource: Optional[str] = None):
        message = f"{resource} not found" if resource else "Not found"
        super().__init__(message, status_code=404)


class ResourceAlreadyExistsError(BaseAPIException):
    """Resource already exists"""
    def __init__(self, resource: str):
        super().__init__(f"{resource} already exists", status_code=409)


# Validation Errors
class ValidationError(BaseAPIException):
    """Validation error"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


# Business Logic Errors
class BusinessLogicError(BaseAPIException):
    """Business logic error"""
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class DuplicateEmailError(BusinessLogicError):
    """Email already registered"""
    def __init__(self):
        super().__init__("Email already exists")


class DuplicateContractorError(BusinessLogicError):
    """Same company and contact person already registered"""
    def __init__(self):
        super().__init__("Contractor with this company and contact person already exists")


class AdminDeletionError(BusinessLogicError):
    """Admin accounts are never deleted through the API"""
    def __init__(self):
        super().__init__("Cannot delete admin users")


# Throttling
class RateLimitExceededError(BaseAPIException):
    """Rate limit exceeded"""
    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message, status_code=429)
