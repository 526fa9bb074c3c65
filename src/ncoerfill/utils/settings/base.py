import os
from pathlib import Path
from typing import TypeVar
from pydantic_settings import BaseSettings, SettingsConfigDict
from loguru import logger

T = TypeVar('T', bound='ABCBaseSettings')

ENV_FILE_OVERRIDE = "NCOERFILL_ENV_FILE"
DEFAULT_ENV_PATH = Path(".envs")
DEFAULT_ENV_FILE_CANDIDATES = [
    DEFAULT_ENV_PATH.joinpath("local.env"),
    DEFAULT_ENV_PATH.joinpath("dev.env"),
    Path(".env"),
]


def find_env_file_if_exists() -> Path | None:
    """
    Locate the env file for the current working directory.

    NCOERFILL_ENV_FILE wins when set; otherwise the first existing default
    candidate is used. Returns None when settings come from the process
    environment only.
    """
    override = os.environ.get(ENV_FILE_OVERRIDE)
    if override:
        override_path = Path(override)
        if not override_path.exists():
            raise FileNotFoundError(f"Env file {override_path} (from {ENV_FILE_OVERRIDE}) does not exist.")
        return override_path

    for env_path in DEFAULT_ENV_FILE_CANDIDATES:
        if env_path.exists():
            logger.debug(f"Found env file: {env_path}")
            return env_path
    return None


class ABCBaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @classmethod
    def load(cls: type[T], env_file: str | Path | None = None) -> T:
        """
        Build settings from the environment plus an env file.

        The env file is looked up when settings are loaded, not at import,
        so a CLI run picks up the file beside the fields it is working on.
        Process environment variables still take precedence over the file.

        Args:
            env_file: Explicit env file; discovered with find_env_file_if_exists when omitted.
        """
        if env_file is not None:
            env_file = Path(env_file)
            if not env_file.exists():
                raise FileNotFoundError(f"Env file {env_file} does not exist.")
        else:
            env_file = find_env_file_if_exists()
        return cls(_env_file=env_file)  # type: ignore[call-arg]
