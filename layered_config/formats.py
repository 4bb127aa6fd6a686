"""
JSON and YAML codecs for flat configuration mappings.

Decoders accept raw bytes or text and return the top-level mapping. Nested
objects are returned as-is; the store treats them as opaque values.
"""

import json
from typing import Any, Dict, Mapping, Union

import yaml

from .errors import ConfigParseError

RawData = Union[bytes, str]


def decode_json(raw: RawData, source: str = "<json>") -> Dict[str, Any]:
    """
    Decode a JSON document whose root is an object.

    Args:
        raw: JSON bytes or text
        source: Name used in error messages (usually the file path)

    Returns:
        Top-level mapping
    """
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigParseError(source, f"invalid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise ConfigParseError(
            source, f"JSON root must be an object, got {type(parsed).__name__}"
        )
    return parsed


def decode_yaml(raw: RawData, source: str = "<yaml>") -> Dict[str, Any]:
    """
    Decode a YAML document whose root is a mapping.

    An empty document decodes to an empty mapping.
    """
    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigParseError(source, f"invalid YAML: {e}") from e

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigParseError(
            source, f"YAML root must be a mapping, got {type(parsed).__name__}"
        )
    # YAML allows non-string keys (ints, bools); keys are compared as text
    return {str(key): value for key, value in parsed.items()}


def encode_json(values: Mapping[str, Any]) -> bytes:
    """Pretty-printed JSON with sorted keys. Non-JSON scalars are stringified."""
    return json.dumps(
        dict(values), indent=2, sort_keys=True, ensure_ascii=False, default=str
    ).encode("utf-8")


def encode_yaml(values: Mapping[str, Any]) -> bytes:
    """Block-style YAML with sorted keys."""
    return yaml.safe_dump(
        dict(values), default_flow_style=False, sort_keys=True, allow_unicode=True
    ).encode("utf-8")
