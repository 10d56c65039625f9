"""Configuration management for the application.

Provides a singleton configuration class that reads settings from
multiple sources, including environment variables, command line arguments,
and an INI configuration file.
"""

from __future__ import annotations

import argparse
import configparser
import logging
import os
from pathlib import Path
from typing import Annotated, Any, ClassVar, Self

from pydantic import AfterValidator, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import (
    BaseSettings,
    InitSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from pydantic_settings.sources import ConfigFileSourceMixin
from pydantic_settings.sources.types import PathType
from typing_extensions import override

from hostsfile.dirs import DEFAULT_CONFIG_PATH, HOSTS_FILE_DEFAULT, LOG_FILE_DEFAULT
from hostsfile.exceptions import InputFailure
from hostsfile.types import LogLevel
from hostsfile.utilities.fs import get_writable_file_or_tempfile, to_path

logger = logging.getLogger(__name__)

INI_SECTION = "hostsfile"


class IniConfigSettingsSource(InitSettingsSource, ConfigFileSourceMixin):
    """Pydantic settings source that loads variables from an INI file."""

    def __init__(self, settings_cls: type[BaseSettings]):
        """Initialize the INI config settings source."""
        self.paths: list[Path] = []
        """List of successfully read config file paths in chronological order."""

        # DEFAULT_CONFIG_PATH is ordered by precedence. Each file read overwrites
        # values from the previous ones, so read them lowest precedence first.
        self.ini_data = self._read_files(DEFAULT_CONFIG_PATH[::-1])
        super().__init__(settings_cls, self.ini_data)

    # ConfigFileSourceMixin._read_files() with protection against
    # Path.expanduser() failures
    @override
    def _read_files(self, files: PathType | None) -> dict[str, Any]:
        if files is None:
            return {}
        if isinstance(files, (str, os.PathLike)):
            files = [files]
        vars: dict[str, Any] = {}  # noqa: A001
        for file in files:
            try:
                file_path = to_path(file)
            except Exception as e:
                logger.warning("Skipping invalid config file path %s: %s", file, e)
                continue
            if file_path.is_file():
                vars.update(self._read_file(file_path))
        return vars

    @override
    def _read_file(self, path: Path) -> dict[str, Any]:
        """Read from an INI file and return a dictionary of settings."""
        try:
            config = configparser.ConfigParser()
            config.read(path)
            vals = {k: v for k, v in config[INI_SECTION].items()}
            self.paths.append(path)
            logger.info("Loaded config file %s", path)
            return vals
        except Exception as e:
            logger.error("Failed to read config file %s: %s", path, e)
            return {}

    @override
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


def to_path_optional(value: Any) -> Path | None:
    """Convert a value to a Path object with expanded user and resolved symlinks, or None."""
    if value is None:
        return None
    return to_path(value)


ResolvedPath = Annotated[Path, AfterValidator(to_path_optional)]
"""Path type that is user expanded (~) and resolved (absolute+symlinks) after validation."""


def describe_validation_error(e: PydanticValidationError) -> str:
    """Summarize a pydantic validation error on a single line."""
    return "; ".join(
        f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
    )


class HostsfileConfig(BaseSettings):
    """Configuration singleton class for hostsfile."""

    file: ResolvedPath = HOSTS_FILE_DEFAULT
    dry_run: bool = False
    verbose: bool = False
    log_file: ResolvedPath | None = LOG_FILE_DEFAULT
    log_level: LogLevel = LogLevel.WARNING

    model_config = SettingsConfigDict(
        env_prefix="HOSTSFILE_",
        # Validate assignment so CLI args overriding fields are validated too
        validate_assignment=True,
        extra="ignore",
    )

    _instance: ClassVar[Self | None] = None

    _init: ClassVar[bool] = False
    """Flag to indicate if sources should be loaded on next instantiation."""

    _sources: ClassVar[tuple[PydanticBaseSettingsSource, ...]] = tuple()
    """Settings sources that have been loaded."""

    def __new__(cls, **kwargs: Any) -> Self:
        """Create a new instance of the config or return the existing one."""
        if cls._instance is None:
            cls._reset_instance()
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, **kwargs: Any) -> None:
        """Initialize the configuration instance.

        Loads from sources on first instantiation only.
        """
        # Calling __init__ again makes Pydantic reevaluate sources,
        # overwriting the values in the current instance.
        if self._init:
            return
        super().__init__(**kwargs)
        self.__class__._init = True

    @classmethod
    def _reset_instance(cls) -> None:
        cls._instance = None
        cls._init = False
        cls._sources = tuple()

    @field_validator("log_level", mode="before")
    def _case_insensitive_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return LogLevel(v)
        return v

    @field_validator("log_file", mode="after")
    def _ensure_log_file_writable(cls, v: Path | None) -> Path | None:
        """Ensure we have a writable log file."""
        if v is None:
            return None
        try:
            return get_writable_file_or_tempfile(v)
        except OSError as e:
            logger.error(str(e))
            return None

    @override
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003 # unused
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003 # unused
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Parse settings from init args, environment and INI files."""
        cls._sources = (
            init_settings,
            env_settings,
            IniConfigSettingsSource(settings_cls),
        )
        return cls._sources

    @classmethod
    def get_default_config(cls) -> Self:
        """Create a Config object with default values.

        Does not read from any sources.
        """
        cls._reset_instance()
        return cls.model_construct()

    @classmethod
    def load(cls) -> Self:
        """Get the config, loading it from its sources on first use.

        :raises InputFailure: If a source holds an invalid value.
        """
        try:
            return cls()
        except PydanticValidationError as e:
            cls._reset_instance()
            raise InputFailure(f"Invalid configuration: {describe_validation_error(e)}") from e

    def parse_cli_args(self, args: argparse.Namespace | dict[str, Any]) -> None:
        """Update the configuration with command line arguments.

        Arguments that are None (not given) do not overwrite existing values.

        :raises InputFailure: If an argument holds an invalid value.
        """
        if isinstance(args, argparse.Namespace):
            args = vars(args)
        for key, value in args.items():
            if value is None or key not in type(self).model_fields:
                continue
            try:
                setattr(self, key, value)
            except PydanticValidationError as e:
                raise InputFailure(
                    f"Invalid value for {key}: {describe_validation_error(e)}"
                ) from e
