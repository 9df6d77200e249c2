"""
Error Extractor
Finds error messages and codes in the differently shaped Webglobe response envelopes
"""

from enum import Enum
from typing import Any, NamedTuple, Optional, Sequence


KeyPath = Sequence[str]

UNKNOWN_ERROR = "Unknown API error"

# Order matters: the first path resolving to a non-null value wins
MESSAGE_KEY_PATHS = (
    ("data", "error"),
    ("error", "message"),
    ("message",),
)

CODE_KEY_PATHS = (
    ("data", "code"),
    ("error", "code"),
    ("code",),
)


class ErrorEnvelope(str, Enum):
    """Shape of the error response the message was found in"""

    DATA = "data"          # {"data": {"error": ..., "code": ...}}
    ERROR = "error"        # {"error": {"message": ..., "code": ...}}
    FLAT = "flat"          # {"message": ..., "code": ...}
    UNKNOWN = "unknown"


_ENVELOPE_BY_PATH = {
    MESSAGE_KEY_PATHS[0]: ErrorEnvelope.DATA,
    MESSAGE_KEY_PATHS[1]: ErrorEnvelope.ERROR,
    MESSAGE_KEY_PATHS[2]: ErrorEnvelope.FLAT,
}


class ExtractedError(NamedTuple):
    """Error details pulled out of a decoded response body"""

    message: str
    code: Any
    envelope: ErrorEnvelope


def get_path_value(data: Any, keys: KeyPath) -> Any:
    """
    Safely read a value from nested dictionaries.

    Args:
        data: Decoded JSON value
        keys: Keys to follow, outermost first

    Returns:
        The value at the end of the path, or None if any key is missing
    """
    for key in keys:
        if isinstance(data, dict) and key in data:
            data = data[key]
        else:
            return None
    return data


def _first_match(data: Any, key_paths: Sequence[KeyPath]):
    for keys in key_paths:
        value = get_path_value(data, keys)
        if value is not None:
            return tuple(keys), value
    return None, None


def first_available_value(data: Any, key_paths: Sequence[KeyPath]) -> Any:
    """
    Probe several key paths in order and return the first non-null value.

    Args:
        data: Decoded JSON value
        key_paths: Candidate key paths in priority order

    Returns:
        The first value found, or None
    """
    return _first_match(data, key_paths)[1]


def extract_error(body: Any) -> ExtractedError:
    """
    Extract the error message and error code from a failed response body.

    Message and code are probed independently, so they may come from
    different envelopes.

    Args:
        body: Decoded JSON response body

    Returns:
        ExtractedError with the message (UNKNOWN_ERROR when nothing matched),
        the code (None when nothing matched) and the envelope of the message
    """
    path, message = _first_match(body, MESSAGE_KEY_PATHS)
    code = first_available_value(body, CODE_KEY_PATHS)

    if message is None:
        return ExtractedError(UNKNOWN_ERROR, code, ErrorEnvelope.UNKNOWN)

    return ExtractedError(str(message), code, _ENVELOPE_BY_PATH[path])
