"""
Exception hierarchy for the layered configuration loader.

I/O failures (missing or unreadable files) are not wrapped: the original
``OSError`` reaches the caller unchanged. Everything the loader itself
detects derives from ``ConfigError``.
"""

from typing import Any, Optional


# ============================================================================
# BASE
# ============================================================================

class ConfigError(Exception):
    """Base exception for configuration failures."""
    pass


# ============================================================================
# FORMAT / PARSE ERRORS
# ============================================================================

class UnsupportedFormatError(ConfigError, ValueError):
    """Raised when a file extension does not map to a known decoder."""

    def __init__(self, extension: str, kind: str = "file"):
        self.extension = extension
        super().__init__(f"unsupported {kind} type: {extension or '<none>'}")


class ConfigParseError(ConfigError, ValueError):
    """Raised when a source cannot be decoded by its selected decoder."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"failed to parse {source}: {reason}")


class DotEnvParseError(ConfigParseError):
    """Raised when a dot-env line is rejected."""

    def __init__(self, source: str, line: int, content: str):
        self.line = line
        self.content = content
        super().__init__(source, f"line {line}: invalid statement {content!r}")


# ============================================================================
# CRYPTOGRAPHIC ERRORS
# ============================================================================

class DecryptionError(ConfigError):
    """Base exception for encrypted-file failures."""
    pass


class InvalidEncodingError(DecryptionError):
    """Raised when an encrypted blob is not valid base64."""
    pass


class CiphertextTooShortError(DecryptionError):
    """Raised when the decoded blob cannot even hold the nonce."""

    def __init__(self, size: int, nonce_size: int):
        self.size = size
        self.nonce_size = nonce_size
        super().__init__(
            f"ciphertext too short: {size} bytes, nonce needs {nonce_size}"
        )


class AuthenticationError(DecryptionError):
    """Raised when the AEAD tag does not verify (wrong secret or corrupt data)."""
    pass


# ============================================================================
# PROJECTION / VALIDATION ERRORS
# ============================================================================

class ValueTypeError(ConfigError, TypeError):
    """Raised when a stored value is read as the wrong kind."""
    pass


class ProjectionError(ConfigError):
    """Raised when the store cannot be projected onto the target model."""
    pass


class RuleViolation(ConfigError):
    """A single validation rule rejected a value."""

    def __init__(self, rule: str, value: Any):
        self.rule = rule
        self.value = value
        super().__init__(f"value {value!r} violates rule {rule!r}")


class ConfigValidationError(ConfigError):
    """
    Raised when a projected field fails one of its rules.

    ``target`` holds the populated and defaulted model instance as it was
    when validation stopped.
    """

    def __init__(
        self,
        field: str,
        rule: str,
        value: Any,
        source_key: Optional[str] = None,
        target: Optional[Any] = None,
    ):
        self.field = field
        self.rule = rule
        self.value = value
        self.source_key = source_key
        self.target = target
        where = f"{field!r} ({source_key})" if source_key else repr(field)
        super().__init__(
            f"validation failed: field {where} failed rule {rule!r} (value={value!r})"
        )
