from .errors import (
    AuthServerError,
    ConfigurationError,
    DeleteNotConfirmedError,
    ElementNotReadyError,
    FlowError,
    InvalidArgumentError,
    InvalidPayloadError,
    MalformedResponseError,
    NavigationError,
    TokenAcquisitionError,
)

__all__ = [
    "FlowError",
    "ConfigurationError",
    "InvalidArgumentError",
    "InvalidPayloadError",
    "NavigationError",
    "ElementNotReadyError",
    "DeleteNotConfirmedError",
    "TokenAcquisitionError",
    "AuthServerError",
    "MalformedResponseError",
]
