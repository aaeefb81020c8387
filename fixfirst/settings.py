import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from fixfirst.constants import (
    APP_DIRNAME,
    CONFIG_DIRNAME,
    DEFAULT_USER_ID,
    ENV_FAILURE_MODE,
    ENV_LOG_LEVEL,
    ENV_ROLE,
    ENV_USER,
    SETTINGS_FILENAME,
)
from fixfirst.errors import InvalidConfigSchemaError, InvalidJsonFormatError
from fixfirst.rules.models import FailureMode, UserRole
from fixfirst.rules.schema import first_schema_error, settings_validator
from fixfirst.utils import read_json_safe, write_json


def default_root() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / APP_DIRNAME


@dataclass(frozen=True)
class Settings:
    root: Path
    user_id: str = DEFAULT_USER_ID
    role: UserRole = UserRole.USER
    failure_mode: FailureMode = FailureMode.OPEN
    log_level: str = "warning"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def as_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "role": self.role.value,
            "failure_mode": self.failure_mode.value,
            "log_level": self.log_level,
        }


class SettingsRepository:
    def __init__(self, root: Optional[Path] = None) -> None:
        self._root = root or default_root()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def settings_path(self) -> Path:
        return self.root / CONFIG_DIRNAME / SETTINGS_FILENAME

    def load_file(self) -> dict[str, Any]:
        payload, error = read_json_safe(self.settings_path)
        if error is not None:
            raise InvalidJsonFormatError(self.settings_path, error)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise InvalidConfigSchemaError(self.settings_path, "expected a JSON object")
        return payload

    def load(self, environ: Optional[dict[str, str]] = None) -> Settings:
        env = os.environ if environ is None else environ
        merged = dict(self.load_file())
        overrides = {
            "user_id": env.get(ENV_USER),
            "role": env.get(ENV_ROLE),
            "failure_mode": env.get(ENV_FAILURE_MODE),
            "log_level": env.get(ENV_LOG_LEVEL),
        }
        for key, value in overrides.items():
            if value:
                merged[key] = value.strip()
        if merged.get("role"):
            merged["role"] = str(merged["role"]).upper()
        if merged.get("failure_mode"):
            merged["failure_mode"] = str(merged["failure_mode"]).lower()
        if merged.get("log_level"):
            merged["log_level"] = str(merged["log_level"]).lower()

        schema_error = first_schema_error(settings_validator, merged)
        if schema_error is not None:
            raise InvalidConfigSchemaError(self.settings_path, schema_error)

        return Settings(
            root=self.root,
            user_id=merged.get("user_id", DEFAULT_USER_ID),
            role=UserRole(merged.get("role", UserRole.USER.value)),
            failure_mode=FailureMode(merged.get("failure_mode", FailureMode.OPEN.value)),
            log_level=merged.get("log_level", "warning"),
        )

    def save(self, settings: Settings) -> None:
        write_json(self.settings_path, settings.as_dict())
