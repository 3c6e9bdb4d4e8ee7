class FlowError(Exception):
    """Base class for every error raised by webqa_flows."""


class ConfigurationError(FlowError):
    """Static configuration is missing or invalid. Never retried."""


class InvalidArgumentError(FlowError):
    pass


class InvalidPayloadError(FlowError):
    pass


class NavigationError(FlowError):
    pass


class ElementNotReadyError(FlowError):
    """A UI element did not reach the expected state, or interacting with it failed."""


class DeleteNotConfirmedError(FlowError):
    pass


class TokenAcquisitionError(FlowError):
    """Token exchange failed. The underlying exception, if any, is chained as __cause__."""


class AuthServerError(TokenAcquisitionError):
    def __init__(self, status_code: int, status_text: str):
        self.status_code = status_code
        self.status_text = status_text
        super().__init__(f"Failed to get token: {status_text} (Status Code: {status_code})")


class MalformedResponseError(TokenAcquisitionError):
    pass
