"""
forgepolicy logging utilities.

Provides configurable logging for policy decisions, ownership transfers
and signoff site traffic. Consumer secrets and tokens are never logged.
"""

import logging
import re
from typing import Any

_root_logger = logging.getLogger("forgepolicy")
_policy_logger = logging.getLogger("forgepolicy.policy")
_signoff_logger = logging.getLogger("forgepolicy.signoff")

# Patterns for secrets that should be masked
_SENSITIVE_PATTERNS = [
    # OAuth PLAINTEXT signatures ("secret&token_secret")
    (re.compile(r"oauth_signature=[^&\s]+"), "oauth_signature=[REDACTED]"),
    (re.compile(r"oauth_token_secret=[^&\s]+"), "oauth_token_secret=[REDACTED]"),
    (re.compile(r"(signoff_secret|secret|token|password)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = frozenset(
    {"oauth_signature", "signoff_secret", "secret", "token", "password"}
)

# Visible prefix length when a token must be shown
_TOKEN_PREVIEW_LENGTH = 4


def configure_logging(
    level: int = logging.INFO,
    policy_level: int | None = None,
    signoff_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure forgepolicy logging.

    Args:
        level: Default log level for all package loggers (default: INFO)
        policy_level: Log level for policy decisions (default: same as level)
        signoff_level: Log level for signoff HTTP traffic (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from forgepolicy.logging import configure_logging

        # Trace every permission decision
        configure_logging(level=logging.INFO, policy_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _root_logger.setLevel(level)
    _root_logger.addHandler(handler)

    _policy_logger.setLevel(policy_level if policy_level is not None else level)
    _signoff_logger.setLevel(signoff_level if signoff_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a forgepolicy logger.

    Args:
        name: Logger name suffix (e.g., "policy", "transfer"). If None, returns the package logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _root_logger
    return logging.getLogger(f"forgepolicy.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask consumer secrets and token secrets in a string.

    Args:
        text: Text that may contain sensitive data

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def truncate_token(token: str) -> str:
    """Show only the first few characters of a token."""
    if len(token) <= _TOKEN_PREVIEW_LENGTH * 2:
        return "[TOKEN_REDACTED]"
    return f"{token[:_TOKEN_PREVIEW_LENGTH]}..."


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Keys are matched case-insensitively and by substring, so
    ``oauth_token_secret`` is masked by the ``secret`` key.
    ``oauth_token`` values are truncated rather than removed.
    """
    if sensitive_keys is None:
        sensitive_keys = set(_DEFAULT_SENSITIVE_KEYS)

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if key_lower == "oauth_token" and isinstance(value, str):
            result[key] = truncate_token(value)
        elif key_lower in sensitive_keys or any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        else:
            result[key] = value

    return result


def describe_actor(actor: Any) -> str:
    """Render an actor for log lines."""
    login = getattr(actor, "login", None)
    return login if login else "anonymous"


def log_policy_decision(check: str, actor: Any, target: str, result: bool) -> None:
    """
    Log a permission decision at DEBUG level.

    Args:
        check: Predicate name (e.g., "can_view", "is_admin")
        actor: The candidate actor
        target: Project slug or repository name
        result: The decision
    """
    if not _policy_logger.isEnabledFor(logging.DEBUG):
        return

    _policy_logger.debug(
        f"{check}: actor={describe_actor(actor)}, target={target}, result={result}"
    )


def log_signoff_request(method: str, url: str, form: dict[str, Any] | None = None) -> None:
    """Log a signoff site request at DEBUG level with secrets masked."""
    if not _signoff_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]
    if form:
        log_parts.append(f"form={safe_log_dict(form)}")

    _signoff_logger.debug(" | ".join(log_parts))


def log_signoff_response(
    status_code: int, url: str, body: str | None = None, elapsed_ms: float | None = None
) -> None:
    """Log a signoff site response at DEBUG level with secrets masked."""
    if not _signoff_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]
    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")
    if body:
        log_parts.append(f"body={mask_sensitive_data(body)}")

    _signoff_logger.debug(" | ".join(log_parts))


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "truncate_token",
    "safe_log_dict",
    "describe_actor",
    "log_policy_decision",
    "log_signoff_request",
    "log_signoff_response",
]
