class DomainError(Exception):
    """Base exception for business rule violations."""


class InputError(DomainError):
    """Raised when an input (coordinate, clock reading, form value) is malformed."""


class ValidationError(InputError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class PermissionDeniedError(DomainError):
    """Raised when the user refused access to a device capability. Retryable."""


class LocationPermissionDenied(PermissionDeniedError):
    pass


class CameraPermissionDenied(PermissionDeniedError):
    pass


class LocationError(InputError):
    """Raised when no usable position fix could be obtained."""


class LocationUnavailable(LocationError):
    pass


class LocationTimeout(LocationError):
    pass


class RaceError(DomainError):
    """Raised when a concurrent writer got there first. Never retried automatically."""

    def __init__(self, message: str = "Someone already completed this; refresh and try again"):
        super().__init__(message)


class AlreadyExistsError(RaceError):
    pass


class PreconditionFailedError(RaceError):
    pass


class DeviceError(DomainError):
    """Raised when the capture device fails; the liveness session is torn down."""


class DeviceUnavailableError(DeviceError):
    pass
