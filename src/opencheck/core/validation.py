"""
Input validation and normalization utilities for OpenCheck.

Provides validation for npm package names, the declared version range
normalization used by the aggregator, and response size guards used by
the HTTP collectors.
"""

import re
from urllib.parse import quote

from opencheck.core.exceptions import ValidationError

# npm package name pattern, optionally scoped (@scope/name).
# Uppercase is accepted for legacy packages published before the rule existed.
_PACKAGE_NAME_PATTERN = re.compile(
    r"^(?:@[a-z0-9-*~][a-z0-9-*._~]*/)?[a-z0-9-~][a-z0-9-._~]*$",
    re.IGNORECASE,
)

# npm registry limit
MAX_NAME_LENGTH = 214

# Maximum response size (10 MB)
MAX_RESPONSE_SIZE = 10 * 1024 * 1024

# Range operators removed by normalize_version_range
_RANGE_OPERATORS = re.compile(r"[\^~>=<]")


def normalize_version_range(declared: str) -> str:
    """Reduce a declared version range to a single comparable version string.

    Removes the ``^ ~ > = <`` operators and keeps the first
    whitespace-delimited token, so ``"^1.3.0"`` becomes ``"1.3.0"`` and
    ``">=1.2.0 <2.0.0"`` becomes ``"1.2.0"``. This is a heuristic, not
    semver range resolution: the result may not match the installed
    version.

    Args:
        declared: Raw range string from the manifest.

    Returns:
        The normalized version, or an empty string if nothing remains.
    """
    tokens = _RANGE_OPERATORS.sub("", declared).split()
    return tokens[0] if tokens else ""


def validate_package_name(name: str) -> str:
    """Validate an npm package name.

    Args:
        name: Package name to validate.

    Returns:
        The name, unchanged.

    Raises:
        ValidationError: If the package name is invalid.
    """
    if not name:
        raise ValidationError("package_name", name or "", "Package name cannot be empty")

    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            "package_name",
            name[:50] + "...",
            f"Package name exceeds {MAX_NAME_LENGTH} character limit",
        )

    if any(ord(c) < 32 or ord(c) == 127 for c in name):
        raise ValidationError(
            "package_name", repr(name), "Package name contains invalid control characters"
        )

    if not _PACKAGE_NAME_PATTERN.match(name):
        raise ValidationError(
            "package_name",
            name,
            "Package name must be URL-safe and may not start with '.' or '_'",
        )

    return name


def encode_package_name_for_url(name: str, keep_scope_slash: bool = False) -> str:
    """URL-encode a package name for use in API URLs.

    The registry metadata endpoint expects the scope separator encoded
    (``@scope%2Fname``); the downloads endpoint takes it verbatim.

    Args:
        name: Package name to encode.
        keep_scope_slash: Leave the ``/`` of a scoped name unencoded.

    Returns:
        URL-encoded package name.
    """
    safe = "@/" if keep_scope_slash else "@"
    return quote(name, safe=safe)


def validate_response_size(
    content_length: int | None,
    max_size: int = MAX_RESPONSE_SIZE,
) -> None:
    """Validate that a response size is within acceptable limits.

    Args:
        content_length: The Content-Length header value (may be None).
        max_size: Maximum allowed response size in bytes.

    Raises:
        ValidationError: If the response is too large.
    """
    if content_length is not None and content_length > max_size:
        size_mb = content_length / (1024 * 1024)
        max_mb = max_size / (1024 * 1024)
        raise ValidationError(
            "response_size",
            f"{size_mb:.1f} MB",
            f"Response exceeds maximum size of {max_mb:.0f} MB",
        )
