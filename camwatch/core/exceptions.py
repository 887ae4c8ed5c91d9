class CamwatchException(Exception):
    """Base exception for the monitoring platform"""

    pass


class UnauthorizedException(CamwatchException):
    """Raised when credentials, JWT or session validation fails"""

    pass


class NotFoundException(CamwatchException):
    """Raised when resource not found"""

    pass


class ForbiddenException(CamwatchException):
    """Raised when a principal lacks the role required for an operation"""

    pass


class ValidationException(CamwatchException):
    """Raised for business logic validation errors"""

    pass


class TenantScopeError(ForbiddenException):
    """Raised when a tenant scope cannot be resolved or lies outside the caller's assignments"""

    pass


class TenantSelectionRequired(ValidationException):
    """Raised when a principal spans several tenants and did not pick one"""

    pass


class ProvisioningError(CamwatchException):
    """Raised when the user-provisioning call is rejected or fails midway"""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code
