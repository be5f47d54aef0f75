"""
Domain exceptions for registry business logic

Raised by contexts and routes when a request breaks a registry rule. The
API renders RegistryValidationError as 400 and RegistryConflictError as 409.
"""


class RegistryValidationError(Exception):
    """Raised when input violates a registry rule (unknown reference, empty name, ...)"""
    pass


class RegistryConflictError(RegistryValidationError):
    """Raised when a unique attribute is already taken"""
    pass
