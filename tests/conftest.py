"""
Shared pytest fixtures for the layered-config test suite

Provides:
- Process environment isolation (dot-env loading exports into os.environ)
- File writers for plain and encrypted config files
- A recording logging sink
"""

import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from unittest.mock import patch

import pytest

from layered_config.encryption import AESGCMEncryption

# Variables the tests read or write through the loaders
TEST_VARIABLES = (
    "APP_ENV",
    "APP_NAME",
    "APP_PORT",
    "APP_DEBUG",
    "APP_MODE",
    "STAGE",
)


# ============================================================================
# ENVIRONMENT FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def isolated_environ():
    """Restore os.environ after every test and start without test variables."""
    with patch.dict(os.environ):
        for name in TEST_VARIABLES:
            os.environ.pop(name, None)
        yield


# ============================================================================
# FILE FIXTURES
# ============================================================================

@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, Union[str, bytes]], Path]:
    """Write a file under tmp_path and return its path."""

    def _write(name: str, content: Union[str, bytes]) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_encrypted(tmp_path: Path) -> Callable[[str, Union[str, bytes], str], Path]:
    """Encrypt plaintext under a secret and write it as a base64 .enc file."""

    def _write(name: str, plaintext: Union[str, bytes], secret: str) -> Path:
        if isinstance(plaintext, str):
            plaintext = plaintext.encode("utf-8")
        path = tmp_path / name
        AESGCMEncryption(secret).write_encrypted(plaintext, path)
        return path

    return _write


# ============================================================================
# LOGGING FIXTURES
# ============================================================================

class RecordingLogger:
    """Logging sink that keeps every notification."""

    def __init__(self):
        self.infos: List[Tuple[str, Dict[str, Any]]] = []
        self.errors: List[Tuple[str, BaseException, Dict[str, Any]]] = []

    def info(self, message: str, fields: Optional[Dict[str, Any]] = None) -> None:
        self.infos.append((message, dict(fields or {})))

    def error(
        self, message: str, error: BaseException, fields: Optional[Dict[str, Any]] = None
    ) -> None:
        self.errors.append((message, error, dict(fields or {})))


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()
