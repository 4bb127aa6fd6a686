"""Helpers for tests that need a populated config without files or environment."""

from typing import Any, Mapping

from .loader import ConfigLoader


def new_test_config(values: Mapping[str, Any]) -> ConfigLoader:
    """Return a ConfigLoader with every pair ``set`` (and normalized)."""
    loader = ConfigLoader()
    for key, value in values.items():
        loader.set(key, value)
    return loader
