"""
Configuration Loader for layered_config

Merges every source into one normalized store; later loads override
earlier keys regardless of source type.

Supports:
- YAML and JSON configuration files
- Dot-env files (also exported to the process environment)
- Single system environment variables
- AES-256-GCM encrypted YAML/JSON files
- Profile overlays selected by an environment variable
- Typed projection onto Pydantic models with defaults and validation
"""

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel

from .errors import ConfigError
from .formats import RawData, decode_json, decode_yaml, encode_json, encode_yaml
from .logging_config import ConfigLogger, NullLogger
from .normalize import normalize_key
from .profile import ProfileDescriptor, resolve_profile
from .projector import project
from .schema import FieldSpec
from .sources import (
    DEFAULT_DOTENV,
    PathLike,
    export_environ,
    read_dotenv_file,
    read_encrypted_file,
    read_structured_file,
)
from .store import ConfigStore

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ConfigLoader:
    """
    Layered configuration session.

    Owns one ConfigStore. Sources are merged in call order, last write
    wins::

        loader = ConfigLoader()
        loader.load_dotenv(".env")
        loader.load_with_profile("APP_ENV", "config.yaml")
        app = loader.unmarshal(AppConfig, APP_FIELDS)

    Not safe for concurrent mutation.
    """

    def __init__(self, logger: Optional[ConfigLogger] = None):
        """
        Initialize an empty session.

        Args:
            logger: Optional sink notified of loader successes and failures
        """
        self._store = ConfigStore()
        self._logger: ConfigLogger = logger or NullLogger()

    # ------------------------------------------------------------------
    # Store access
    # ------------------------------------------------------------------

    @property
    def store(self) -> ConfigStore:
        return self._store

    def set_logger(self, logger: Optional[ConfigLogger]) -> None:
        self._logger = logger or NullLogger()

    def get(self, key: str, default: Any = None) -> Any:
        return self._store.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._store.set(key, value)

    def get_all(self) -> Dict[str, Any]:
        return self._store.get_all()

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        return self._store.get_int(key, default)

    def get_bool(self, key: str, default: Optional[bool] = None) -> Optional[bool]:
        return self._store.get_bool(key, default)

    def get_float(self, key: str, default: Optional[float] = None) -> Optional[float]:
        return self._store.get_float(key, default)

    def get_str(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._store.get_str(key, default)

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    @contextmanager
    def _reporting(self, event: str, fields: Dict[str, Any]) -> Iterator[None]:
        try:
            yield
        except (ConfigError, OSError) as e:
            self._logger.error(f"{event}_failed", e, fields)
            raise
        self._logger.info(f"{event}_success", fields)

    def _merge(self, values: Dict[str, Any]) -> None:
        self._store.update(values)

    def load_file(self, path: PathLike) -> None:
        """
        Load configuration from a YAML or JSON file.

        Args:
            path: Path to a .json, .yaml or .yml file
        """
        with self._reporting("load_file", {"path": str(path)}):
            self._merge(read_structured_file(path))

    def load_files(self, *paths: PathLike) -> None:
        """
        Load several files in order; later files override earlier ones.

        Stops at the first failure. Values merged before it stay in the store.
        """
        for path in paths:
            self.load_file(path)

    def load_dotenv(self, path: Optional[PathLike] = None, *, export: bool = True) -> None:
        """
        Load a dot-env file.

        Args:
            path: Path to the file (default ``.env``)
            export: Also write the raw pairs into ``os.environ``
        """
        path = path or DEFAULT_DOTENV
        with self._reporting("load_dotenv", {"path": str(path)}):
            pairs = read_dotenv_file(path)
            self._merge(pairs)
            if export:
                export_environ(pairs)

    def load_sys_env(self, name: str) -> None:
        """
        Load a single variable from the process environment.

        The value is stored as its uppercased raw string; unlike the other
        sources it is not type-coerced ("8080" stays the string "8080").
        An unset variable is skipped.
        """
        value = os.environ.get(name)
        if value is not None:
            self._store.set(name, normalize_key(value), coerce=False)
        self._logger.info("load_sys_env_success", {"key": name, "found": value is not None})

    def load_encrypted_file(self, path: PathLike, secret: str) -> None:
        """
        Load an AES-256-GCM encrypted YAML or JSON file.

        Args:
            path: Path to a .json.enc, .yaml.enc or .yml.enc file
            secret: Secret the file was encrypted with
        """
        with self._reporting("load_encrypted_file", {"path": str(path)}):
            self._merge(read_encrypted_file(path, secret))

    def load_json(self, data: RawData, source: str = "<json>") -> None:
        """Merge a JSON document held in memory."""
        self._merge(decode_json(data, source))

    def load_yaml(self, data: RawData, source: str = "<yaml>") -> None:
        """Merge a YAML document held in memory."""
        self._merge(decode_yaml(data, source))

    def load_with_profile(
        self, env_var_name: str, base_file_path: PathLike
    ) -> ProfileDescriptor:
        """
        Load a base file and, if present, its profile overlay.

        Examples (APP_ENV=dev):
            config.yaml -> config.yaml + config-dev.yaml
            config.json -> config.json + config-dev.json
            .env        -> .env + .env.dev

        A missing profile file is not an error; a malformed one is.

        Returns:
            The resolved ProfileDescriptor
        """
        with self._reporting("resolve_profile", {"env": env_var_name, "path": str(base_file_path)}):
            descriptor = resolve_profile(env_var_name, base_file_path)

        load = self.load_dotenv if descriptor.is_dotenv else self.load_file
        load(descriptor.base_file_path)

        if descriptor.profile_path is None:
            return descriptor

        if Path(descriptor.profile_path).exists():
            load(descriptor.profile_path)
        else:
            logger.debug("Profile file %s not found, using base only", descriptor.profile_path)
        return descriptor

    # ------------------------------------------------------------------
    # Projection / export
    # ------------------------------------------------------------------

    def unmarshal(
        self,
        model_cls: Type[ModelT],
        fields: Optional[Sequence[Union[FieldSpec, Dict[str, Any]]]] = None,
    ) -> ModelT:
        """
        Project the store onto a Pydantic model, apply defaults, validate.

        Args:
            model_cls: Target model class
            fields: FieldSpec table (derived from the model when omitted)

        Returns:
            Validated model instance
        """
        return project(self._store.get_all(), model_cls, fields)

    def to_json(self) -> bytes:
        """Export the store as pretty-printed JSON."""
        return encode_json(self._store.get_all())

    def to_yaml(self) -> bytes:
        """Export the store as YAML."""
        return encode_yaml(self._store.get_all())

    @classmethod
    def from_json(cls, data: RawData, logger: Optional[ConfigLogger] = None) -> "ConfigLoader":
        loader = cls(logger=logger)
        loader.load_json(data)
        return loader

    @classmethod
    def from_yaml(cls, data: RawData, logger: Optional[ConfigLogger] = None) -> "ConfigLoader":
        loader = cls(logger=logger)
        loader.load_yaml(data)
        return loader

    def __repr__(self) -> str:
        return f"ConfigLoader(keys={len(self._store)})"


def load_config(
    env_var_name: str = "APP_ENV",
    config_file: PathLike = "config.yaml",
    logger: Optional[ConfigLogger] = None,
) -> ConfigLoader:
    """
    Convenience function to load a base file plus its profile overlay.

    Args:
        env_var_name: Variable selecting the profile
        config_file: Base config file (yaml/json/.env)
        logger: Optional logging sink

    Returns:
        Populated ConfigLoader

    Example:
        >>> loader = load_config("APP_ENV", "config.yaml")
        >>> loader.get("APP_PORT")
    """
    loader = ConfigLoader(logger=logger)
    loader.load_with_profile(env_var_name, config_file)
    return loader
