import logging
from typing import Type
from urllib.parse import urlparse

from webqa_flows.errors import FlowError, InvalidArgumentError


def is_blank(value) -> bool:
    return not isinstance(value, str) or len(value.strip()) == 0


def require_text(value, name: str, error_cls: Type[FlowError] = InvalidArgumentError) -> str:
    """Return ``value`` stripped, or log and raise ``error_cls`` if it is not a non-blank
    string."""
    if is_blank(value):
        error_msg = f"Invalid {name} provided: '{value}'"
        logging.error(error_msg)
        raise error_cls(error_msg)
    return value.strip()


def require_index(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        error_msg = f"Invalid {name} provided: '{value}'. Must be an integer >= 0"
        logging.error(error_msg)
        raise InvalidArgumentError(error_msg)
    return value


def is_http_url(value) -> bool:
    if is_blank(value):
        return False
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
