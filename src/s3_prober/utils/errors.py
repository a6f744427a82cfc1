"""Error sanitization utilities to keep credentials out of logs."""

import re

# Patterns that might expose credentials
SENSITIVE_PATTERNS = [
    r"access[_\s]?key[_\s]?id[:=\s]+([A-Za-z0-9]{16,128})",
    r"secret[_\s]?access[_\s]?key[:=\s]+([A-Za-z0-9/+=]{20,128})",
    r"session[_\s]?token[:=\s]+([A-Za-z0-9/+=]+)",
    r"X-Amz-Credential=([^&\s]+)",
    r"X-Amz-Signature=([^&\s]+)",
    r"Signature=([^&\s,]+)",
]

# Field names whose values are always redacted
SENSITIVE_FIELDS = {
    "accesskey",
    "secretkey",
    "password",
    "credential",
    "token",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove credentials.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with credentials redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(
            pattern,
            lambda m: m.group(0).replace(m.group(1), "[REDACTED]"),
            sanitized,
            flags=re.IGNORECASE,
        )

    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"\b{field}[:=\s]+([^\s,;\)]+)",
            rf"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: BaseException | str) -> str:
    """Sanitize exception message.

    Args:
        error: Exception object or message

    Returns:
        Sanitized error message
    """
    return sanitize_error_message(str(error))
