"""Exception hierarchy for the synchronization engine."""


class SyncError(Exception):
    """Base class for all errors raised by climasync."""


class GatewayError(SyncError):
    """A call to the remote device gateway failed."""


class AuthError(GatewayError):
    """The remote session is missing, expired or was rejected."""


class NetworkError(GatewayError):
    """The remote service could not be reached or timed out."""


class ApplicationError(GatewayError):
    """The remote service answered with a non-success application code.

    The transport succeeded, so retrying the same request is pointless.
    The remote message is kept verbatim for logging.
    """

    def __init__(self, code: int | str, message: str = "") -> None:
        self.code = code
        self.message = message
        super().__init__(f"Remote error {code}: {message}")


class SettingValidationError(SyncError):
    """A user write could not be mapped to a valid remote setting.

    Raised for unknown setting names, malformed node paths, read-only
    nodes and values outside the setting's domain.  Writes that raise
    this are dropped locally without a remote call.
    """


class StoreError(SyncError):
    """The state store rejected an operation."""
