"""Configuration models using Pydantic."""

import logging
import re
from collections.abc import Mapping
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, field_validator

from svcinstall.config.paths import get_current_user, get_home_dir, get_working_dir
from svcinstall.errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "python-service"

# Names end up in file names, unit names and SCM entries
_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.@-]*$")

ENV_ENTRY_ERROR = "Environment variables must be specified like '--env NAME=VALUE'."


def _name_or_default(value: Any) -> Any:
    return value or DEFAULT_SERVICE_NAME


def _check_name(value: str) -> str:
    if not _NAME_PATTERN.match(value):
        raise ValueError(
            f"Invalid service name '{value}'. Use letters, digits, '.', '_', '@' or '-'."
        )
    return value


class InstallConfig(BaseModel):
    """Everything a manager needs to register one command as one service.

    Instances are immutable; normalization returns a new object.
    """

    model_config = ConfigDict(frozen=True)

    system: bool = False
    name: str = DEFAULT_SERVICE_NAME
    cmd: str | None = None
    user: str | None = None
    home: str | None = None
    cwd: str | None = None
    path: tuple[str, ...] = ()
    env: tuple[str, ...] = ()

    @field_validator("system", mode="before")
    @classmethod
    def _default_system(cls, value: Any) -> Any:
        return bool(value)

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> Any:
        return _name_or_default(value)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return _check_name(value)

    @field_validator("path", "env", mode="before")
    @classmethod
    def _empty_sequence(cls, value: Any) -> Any:
        return () if value is None else value

    @field_validator("env")
    @classmethod
    def _validate_env(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for entry in value:
            if "=" not in entry:
                raise ValueError(ENV_ENTRY_ERROR)
        return value


class UninstallConfig(BaseModel):
    """Identifies an installed service: its scope, name and owner's home."""

    model_config = ConfigDict(frozen=True)

    system: bool = False
    name: str = DEFAULT_SERVICE_NAME
    home: str | None = None

    @field_validator("system", mode="before")
    @classmethod
    def _default_system(cls, value: Any) -> Any:
        return bool(value)

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> Any:
        return _name_or_default(value)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return _check_name(value)


ConfigT = TypeVar("ConfigT", InstallConfig, UninstallConfig)


def _format_validation_error(exc: pydantic.ValidationError) -> str:
    messages = []
    for err in exc.errors():
        if err["type"] == "value_error":
            messages.append(str(err["ctx"]["error"]))
        else:
            location = ".".join(str(part) for part in err["loc"])
            messages.append(f"{location}: {err['msg']}")
    return "; ".join(messages)


def _coerce(model: type[ConfigT], options: ConfigT | Mapping[str, Any]) -> ConfigT:
    if isinstance(options, model):
        return options
    try:
        return model.model_validate(dict(options))
    except pydantic.ValidationError as e:
        raise ValidationError(_format_validation_error(e)) from e


def normalize_install_config(
    options: InstallConfig | Mapping[str, Any],
) -> InstallConfig:
    """Fill environment-derived defaults into install options.

    Args:
        options: Raw options, either a mapping or an InstallConfig.

    Returns:
        A new InstallConfig with user, home and cwd resolved where possible.

    Raises:
        ValidationError: If the options fail validation (e.g. env entry without '=').
    """
    config = _coerce(InstallConfig, options)
    normalized = config.model_copy(
        update={
            "user": config.user or get_current_user(),
            "home": config.home or get_home_dir(),
            "cwd": config.cwd or get_working_dir(),
        }
    )
    logger.debug("Normalized install config: %s", normalized)
    return normalized


def normalize_uninstall_config(
    options: UninstallConfig | Mapping[str, Any],
) -> UninstallConfig:
    """Fill environment-derived defaults into uninstall options."""
    config = _coerce(UninstallConfig, options)
    return config.model_copy(update={"home": config.home or get_home_dir()})
