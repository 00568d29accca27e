"""
Typed errors raised by the service layer.
The API exception handler turns them into HTTP responses, so services never
have to build responses themselves and never hide a failure behind an empty result.
"""


class ServiceError(Exception):
    """Base class for all service-layer errors."""

    default_message = "Service error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError, ValueError):
    """Malformed or out-of-domain input, rejected before any storage access."""

    default_message = "Invalid input"


class NotFoundError(ServiceError):
    """A referenced identifier does not exist."""

    default_message = "Resource not found"

    @classmethod
    def for_id(cls, resource, identifier):
        return cls(f"{resource} not found with ID: {identifier}")


class StorageError(ServiceError):
    """The underlying database failed (connectivity, constraint violation...)."""

    default_message = "Storage failure"


class PermissionDeniedError(ServiceError):
    """The acting user may not touch the resource."""

    default_message = "Permission denied"
