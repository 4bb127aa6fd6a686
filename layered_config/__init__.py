"""
Layered Configuration Loader

Provides a single normalized key-value store fed by:
- YAML & JSON config files
- Dot-env files and system environment variables
- AES-256-GCM encrypted config files
- Profile overlays (config-dev.yaml, .env.dev) selected by an env variable

and typed projection onto Pydantic models with defaults and validation.
"""

from .encryption import AESGCMEncryption
from .errors import (
    AuthenticationError,
    CiphertextTooShortError,
    ConfigError,
    ConfigParseError,
    ConfigValidationError,
    DecryptionError,
    DotEnvParseError,
    InvalidEncodingError,
    ProjectionError,
    RuleViolation,
    UnsupportedFormatError,
    ValueTypeError,
)
from .loader import ConfigLoader, load_config
from .logging_config import ConfigLogger, NullLogger, StdlibConfigLogger
from .normalize import ValueKind, normalize_key, normalize_value, value_kind
from .profile import ProfileDescriptor, resolve_profile
from .schema import FieldSpec, Rule, field_specs
from .store import ConfigStore
from .testing import new_test_config

__all__ = [
    "ConfigLoader",
    "load_config",
    "ConfigStore",
    "FieldSpec",
    "Rule",
    "field_specs",
    "ProfileDescriptor",
    "resolve_profile",
    "AESGCMEncryption",
    "ConfigLogger",
    "NullLogger",
    "StdlibConfigLogger",
    "ValueKind",
    "normalize_key",
    "normalize_value",
    "value_kind",
    "new_test_config",
    "ConfigError",
    "UnsupportedFormatError",
    "ConfigParseError",
    "DotEnvParseError",
    "DecryptionError",
    "InvalidEncodingError",
    "CiphertextTooShortError",
    "AuthenticationError",
    "ValueTypeError",
    "ProjectionError",
    "RuleViolation",
    "ConfigValidationError",
]

__version__ = "1.0.0"
