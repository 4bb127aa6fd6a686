"""
Tests for profile resolution

Usage:
    pytest tests/test_profile.py -v
"""

import os
from pathlib import Path

import pytest

from layered_config.errors import UnsupportedFormatError
from layered_config.profile import ProfileDescriptor, resolve_profile


class TestResolveProfile:
    """Test profile path derivation."""

    @pytest.mark.parametrize(
        "base,profile,expected",
        [
            ("config.yaml", "dev", "config-dev.yaml"),
            ("config.yml", "qa", "config-qa.yml"),
            ("config.json", "prod", "config-prod.json"),
            ("conf/app.YAML", "dev", "conf/app-dev.YAML"),
            (".env", "dev", ".env.dev"),
            ("deploy/.env", "staging", "deploy/.env.staging"),
        ],
    )
    def test_profile_paths(self, base, profile, expected):
        descriptor = resolve_profile("APP_ENV", base, {"APP_ENV": profile})
        assert descriptor.profile_name == profile
        assert descriptor.profile_path == expected
        assert descriptor.base_file_path == base

    def test_no_profile_set(self):
        descriptor = resolve_profile("APP_ENV", "config.yaml", {})
        assert descriptor == ProfileDescriptor("APP_ENV", "config.yaml", ".yaml")
        assert descriptor.profile_path is None

    def test_empty_profile_means_none(self):
        descriptor = resolve_profile("APP_ENV", "config.yaml", {"APP_ENV": ""})
        assert descriptor.profile_name is None
        assert descriptor.profile_path is None

    def test_custom_variable_name(self):
        descriptor = resolve_profile("STAGE", "config.json", {"STAGE": "qa", "APP_ENV": "dev"})
        assert descriptor.profile_path == "config-qa.json"

    def test_reads_process_environment_by_default(self):
        os.environ["APP_ENV"] = "dev"
        descriptor = resolve_profile("APP_ENV", Path("config.yaml"))
        assert descriptor.profile_path == "config-dev.yaml"

    def test_unsupported_extension_with_profile(self):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            resolve_profile("APP_ENV", "config.toml", {"APP_ENV": "dev"})
        assert exc_info.value.extension == ".toml"

    def test_unsupported_extension_without_profile(self):
        descriptor = resolve_profile("APP_ENV", "config.toml", {})
        assert descriptor.profile_path is None
        assert descriptor.extension == ".toml"

    def test_is_dotenv(self):
        assert resolve_profile("APP_ENV", ".env", {}).is_dotenv
        assert not resolve_profile("APP_ENV", "config.yaml", {}).is_dotenv
