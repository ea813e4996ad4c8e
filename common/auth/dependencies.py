"""
Authorization header helpers.

Example:
    from common.auth import extract_bearer_token

    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise UnauthorizedException(code="NO_TOKEN")
"""

from typing import Optional


def extract_bearer_token(
    authorization: Optional[str],
    scheme: str = "Bearer",
) -> Optional[str]:
    """
    Extract the token from an authorization header value.

    The header must be exactly "<scheme> <token>": the scheme is matched
    case-sensitively and the token must be a single non-empty segment.

    Args:
        authorization: Raw header value (may be None)
        scheme: Expected auth scheme (default: Bearer)

    Returns:
        Token string, or None when the header is absent or malformed
    """
    if not authorization:
        return None

    parts = authorization.split(" ")

    if len(parts) != 2:
        return None

    header_scheme, token = parts

    if header_scheme != scheme or not token:
        return None

    return token
