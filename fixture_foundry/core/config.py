"""Registry settings validated with Marshmallow and environment defaults."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Final

from dotenv import load_dotenv
from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate

from .errors import ConfigurationError

# Public env vars read when a setting is not given explicitly
CLEANUP_ENV_VAR: Final[str] = "FOUNDRY_CLEANUP"
FAKER_SEED_ENV_VAR: Final[str] = "FOUNDRY_FAKER_SEED"

# Loads .env when present (no-op otherwise)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str) -> int | None:
    """Return an integer environment variable, or ``None`` when unset or blank."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return None
    try:
        return int(val.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {val!r}") from exc


class FactoryReference(fields.Field):
    """Accept factory classes, factory objects, or dotted import strings as-is."""

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError("Factory reference must not be empty.")
        return value.strip() if isinstance(value, str) else value


class FoundryConfigSchema(Schema):
    """Validate the recognized registry options.

    Unknown keys are dropped so host-runner settings can be passed through
    unchanged.
    """

    class Meta:
        unknown = EXCLUDE

    cleanup = fields.Boolean(load_default=None, allow_none=True)
    factories = fields.List(
        FactoryReference(),
        required=True,
        validate=validate.Length(min=1, error="At least one factory is required."),
    )
    faker_seed = fields.Integer(load_default=None, allow_none=True)

    @post_load
    def apply_env_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        if data.get("cleanup") is None:
            data["cleanup"] = env_bool(CLEANUP_ENV_VAR, False)
        if data.get("faker_seed") is None:
            data["faker_seed"] = env_int(FAKER_SEED_ENV_VAR)
        return data


@dataclass(frozen=True, slots=True)
class FoundryConfig:
    """Validated registry settings.

    Attributes
    ----------
    factories: tuple
        Factory references registered at construction, in order.
    cleanup: bool
        Reset the schema at suite end. Only effective when the ORM module's
        own ``cleanup`` flag is also set.
    faker_seed: int | None
        Seed applied to Faker and factory_boy's random generator at suite
        start; ``None`` leaves them untouched.
    """

    factories: tuple[Any, ...]
    cleanup: bool = False
    faker_seed: int | None = None

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> FoundryConfig:
        """Validate ``settings`` and build a config.

        Raises
        ------
        ConfigurationError
            When validation fails; field messages are kept in ``messages``.
        """
        data = load_settings(settings)
        return cls(
            factories=tuple(data["factories"]),
            cleanup=bool(data["cleanup"]),
            faker_seed=data["faker_seed"],
        )

    def merged(self, settings: Mapping[str, Any] | None) -> FoundryConfig:
        """Return a copy with ``settings`` applied on top of this config."""
        if not settings:
            return self
        base: dict[str, Any] = {
            "factories": list(self.factories),
            "cleanup": self.cleanup,
            "faker_seed": self.faker_seed,
        }
        base.update(settings)
        data = load_settings(base)
        return replace(
            self,
            factories=tuple(data["factories"]),
            cleanup=bool(data["cleanup"]),
            faker_seed=data["faker_seed"],
        )


def load_settings(settings: Mapping[str, Any]) -> dict[str, Any]:
    """Run ``settings`` through :class:`FoundryConfigSchema`."""
    if not isinstance(settings, Mapping):
        raise ConfigurationError(
            f"Settings must be a mapping, got {type(settings).__name__}"
        )
    try:
        return FoundryConfigSchema().load(dict(settings))
    except ValidationError as err:
        raise ConfigurationError("Invalid foundry settings", messages=err.messages) from err


__all__ = [
    "CLEANUP_ENV_VAR",
    "FAKER_SEED_ENV_VAR",
    "FoundryConfig",
    "FoundryConfigSchema",
    "env_bool",
    "env_int",
    "load_settings",
]
