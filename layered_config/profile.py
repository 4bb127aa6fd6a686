"""
Profile resolution.

A profile is an environment-named overlay layered on a base file:

- ``config.yaml`` + ``APP_ENV=dev`` -> ``config-dev.yaml``
- ``config.json`` + ``APP_ENV=prod`` -> ``config-prod.json``
- ``.env`` + ``APP_ENV=dev`` -> ``.env.dev``
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import UnsupportedFormatError
from .sources import STRUCTURED_DECODERS, PathLike, file_extension

DOTENV_EXTENSION = ".env"


@dataclass(frozen=True)
class ProfileDescriptor:
    """Where the base file and its profile overlay live."""

    env_var_name: str
    base_file_path: str
    extension: str
    profile_name: Optional[str] = None
    profile_path: Optional[str] = None

    @property
    def is_dotenv(self) -> bool:
        return self.extension == DOTENV_EXTENSION


def resolve_profile(
    env_var_name: str,
    base_file_path: PathLike,
    environ: Optional[Mapping[str, str]] = None,
) -> ProfileDescriptor:
    """
    Decide which profile file applies to a base file.

    Args:
        env_var_name: Variable holding the profile name (e.g. APP_ENV)
        base_file_path: Base config file
        environ: Environment to read (defaults to os.environ)

    Returns:
        ProfileDescriptor; ``profile_path`` is None when no profile is set

    Raises:
        UnsupportedFormatError: a profile is set and the base extension is
            not .json/.yaml/.yml/.env
    """
    env = os.environ if environ is None else environ
    base = str(base_file_path)
    extension = file_extension(base)
    profile_name = env.get(env_var_name) or None

    if profile_name is None:
        return ProfileDescriptor(env_var_name, base, extension)

    if extension in STRUCTURED_DECODERS:
        # keep the caller's spelling of the extension
        stem, original_ext = base[: -len(extension)], base[-len(extension):]
        profile_path = f"{stem}-{profile_name}{original_ext}"
    elif extension == DOTENV_EXTENSION:
        profile_path = f"{base}.{profile_name}"
    else:
        raise UnsupportedFormatError(extension)

    return ProfileDescriptor(env_var_name, base, extension, profile_name, profile_path)
