"""
=============================================================================
HEADER HELPERS
=============================================================================

Pure functions for building and picking apart header values.

=============================================================================
HEADER PARAMETERS
=============================================================================

Several headers carry a main value followed by ";"-separated parameters:

    Content-Type: text/plain; charset=ISO-8859-1
                  ────┬─────  ─────────┬─────────
                      │                │
                 Media type        Parameter
                                (name=value, name is
                                 case-insensitive, value
                                 may be "quoted")

=============================================================================
BASIC AUTHENTICATION (RFC 7617)
=============================================================================

    Authorization: Basic dXNlcjpwYXNz
                   ──┬── ─────┬──────
                     │        │
                  Scheme   base64("user:pass")

Base64 is an encoding, not encryption. Only send Basic credentials over
https.

=============================================================================
"""

import base64
from typing import Dict, Optional, Tuple


AUTHORIZATION = "Authorization"
CONTENT_TYPE = "Content-Type"

DEFAULT_CHARSET = "UTF-8"
TEXT_PLAIN = "text/plain"


def is_empty(value: Optional[str]) -> bool:
    return value is None or value == ""


def first_non_empty(*values: Optional[str]) -> Optional[str]:
    """Return the first value that is neither None nor "", else None."""
    for value in values:
        if not is_empty(value):
            return value
    return None


def build_basic_auth_header_value(user_and_pass: str) -> str:
    """
    Build the Authorization header value for HTTP Basic auth.

    Args:
        user_and_pass: Credentials in the form "{user}:{pass}"

    Returns:
        "Basic " followed by the base64 encoding of the credentials

    Example:
        >>> build_basic_auth_header_value("user:pass")
        'Basic dXNlcjpwYXNz'
    """
    token = base64.b64encode(user_and_pass.encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1].replace('\\"', '"')
    return value


def parse_media_type(header_value: Optional[str]) -> Tuple[str, Dict[str, str]]:
    """
    Split a Content-Type style value into its media type and parameters.

    Parameter names are lowercased; values are unquoted but otherwise
    left as sent.

    Example:
        >>> parse_media_type('text/plain; charset="utf-8"')
        ('text/plain', {'charset': 'utf-8'})
    """
    if not header_value:
        return "", {}

    parts = header_value.split(";")
    media_type = parts[0].strip().lower()
    params: Dict[str, str] = {}

    for part in parts[1:]:
        name, sep, value = part.partition("=")
        if not sep:
            continue  # "text/plain; foo" - not a name=value pair
        name = name.strip().lower()
        if name:
            params[name] = _unquote(value.strip())

    return media_type, params


def parse_header_parameter(header_value: Optional[str], name: str) -> Optional[str]:
    """
    Get one parameter from a header value, e.g. the charset of a Content-Type.

    Returns None when the header or the parameter is missing.

    Example:
        >>> parse_header_parameter("text/plain; charset=ISO-8859-1", "charset")
        'ISO-8859-1'
    """
    _, params = parse_media_type(header_value)
    return params.get(name.lower())


def is_plain_text(content_type: Optional[str]) -> bool:
    """True when the Content-Type header mentions text/plain."""
    return content_type is not None and TEXT_PLAIN in content_type.lower()


def charset_of(content_type: Optional[str], default: str = DEFAULT_CHARSET) -> str:
    """The charset parameter of a Content-Type, or default when absent or empty."""
    return first_non_empty(parse_header_parameter(content_type, "charset"), default)
