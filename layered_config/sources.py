"""
Source readers for the layered configuration loader.

Each reader turns one source into a flat mapping; merging into the store is
done by ``ConfigLoader``. Readers never touch a store.

Supports:
- JSON and YAML files (selected by extension)
- Dot-env files (parsed by python-dotenv)
- AES-256-GCM encrypted JSON/YAML files (``.json.enc``, ``.yaml.enc``, ``.yml.enc``)
"""

import io
import logging
import os
import re
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

from dotenv import dotenv_values
from dotenv.parser import parse_stream

from .encryption import AESGCMEncryption
from .errors import ConfigParseError, DotEnvParseError, UnsupportedFormatError
from .formats import decode_json, decode_yaml

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
Decoder = Callable[[Any, str], Dict[str, Any]]

DEFAULT_DOTENV = ".env"

STRUCTURED_DECODERS: Dict[str, Decoder] = {
    ".json": decode_json,
    ".yaml": decode_yaml,
    ".yml": decode_yaml,
}

ENCRYPTED_DECODERS: Dict[str, Decoder] = {
    ".json.enc": decode_json,
    ".yaml.enc": decode_yaml,
    ".yml.enc": decode_yaml,
}

_DOTENV_KEY = re.compile(r"[A-Za-z_][A-Za-z0-9_.\-]*")


def file_extension(path: PathLike) -> str:
    """
    Return the last suffix of the file name, lowercased.

    Unlike ``os.path.splitext``, a dot-file keeps its name as the
    extension: ``.env`` -> ``.env``, ``config.yaml.enc`` -> ``.enc``.
    """
    name = Path(path).name
    index = name.rfind(".")
    if index < 0:
        return ""
    return name[index:].lower()


def encrypted_suffix(path: PathLike) -> str:
    """Return the compound encrypted suffix, or the plain extension if none matches."""
    name = Path(path).name.lower()
    for suffix in ENCRYPTED_DECODERS:
        if name.endswith(suffix):
            return suffix
    return file_extension(path)


def read_structured_file(path: PathLike) -> Dict[str, Any]:
    """
    Load a flat mapping from a JSON or YAML file.

    Args:
        path: Path to a .json, .yaml or .yml file

    Returns:
        Top-level mapping of the document

    Raises:
        UnsupportedFormatError: extension is not .json/.yaml/.yml
        OSError: file cannot be read
        ConfigParseError: document is malformed or its root is not a mapping
    """
    extension = file_extension(path)
    decoder = STRUCTURED_DECODERS.get(extension)
    if decoder is None:
        raise UnsupportedFormatError(extension)

    raw = Path(path).read_bytes()
    return decoder(raw, str(path))


def read_dotenv_file(path: Optional[PathLike] = None) -> Dict[str, str]:
    """
    Parse a dot-env file into raw string pairs.

    Lines the parser rejects, and keys that are not variable names, raise
    ``DotEnvParseError``. Keys declared without a value are skipped.

    Args:
        path: Path to the file; empty or None means ``.env``

    Returns:
        Mapping of variable name to raw (unnormalized) value
    """
    path = path or DEFAULT_DOTENV
    raw = Path(path).read_bytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ConfigParseError(str(path), f"not valid UTF-8: {e}") from e

    for binding in parse_stream(io.StringIO(text)):
        if binding.error:
            raise DotEnvParseError(
                str(path), binding.original.line, binding.original.string.strip()
            )
        if binding.key is not None and not _DOTENV_KEY.fullmatch(binding.key):
            raise DotEnvParseError(
                str(path), binding.original.line, binding.original.string.strip()
            )

    values = dotenv_values(stream=io.StringIO(text))
    return {key: value for key, value in values.items() if value is not None}


def export_environ(pairs: Mapping[str, str]) -> None:
    """
    Write raw pairs into the process environment.

    This is the process-wide side effect of loading a dot-env file, kept
    separate from the merge so it can be disabled and observed on its own.
    """
    for key, value in pairs.items():
        os.environ[key] = value
    logger.debug("Exported %d variables to process environment", len(pairs))


def read_encrypted_file(path: PathLike, secret: str) -> Dict[str, Any]:
    """
    Decrypt and decode an encrypted JSON/YAML file.

    Pipeline: read -> base64 decode -> AES-256-GCM decrypt -> select decoder
    by compound suffix -> decode.

    Args:
        path: Path to a .json.enc, .yaml.enc or .yml.enc file
        secret: Shared secret the file was encrypted with

    Returns:
        Top-level mapping of the decrypted document

    Raises:
        OSError: file cannot be read
        InvalidEncodingError: content is not base64
        CiphertextTooShortError: decoded blob is shorter than the nonce
        AuthenticationError: wrong secret or corrupted data
        UnsupportedFormatError: suffix is not a known encrypted suffix
        ConfigParseError: decrypted document is malformed
    """
    raw = Path(path).read_bytes()
    plaintext = AESGCMEncryption(secret).decrypt_string(raw)

    suffix = encrypted_suffix(path)
    decoder = ENCRYPTED_DECODERS.get(suffix)
    if decoder is None:
        raise UnsupportedFormatError(suffix, kind="encrypted file")

    return decoder(plaintext, str(path))
