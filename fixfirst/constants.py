from typing import Final


APP_DIRNAME: Final[str] = "fixfirst"
CONFIG_DIRNAME: Final[str] = "config"
RULES_DIRNAME: Final[str] = "rules"

SETTINGS_FILENAME: Final[str] = "settings.json"
CUSTOM_RULES_FILENAME: Final[str] = "custom_rules.json"
PROJECT_RULES_FILENAME: Final[str] = "project_rules.json"
VIOLATIONS_FILENAME: Final[str] = "violations.json"

YAML_SUFFIXES: Final[tuple[str, ...]] = (".yaml", ".yml")

DEFAULT_USER_ID: Final[str] = "local"
ENV_USER: Final[str] = "FIXFIRST_USER"
ENV_ROLE: Final[str] = "FIXFIRST_ROLE"
ENV_FAILURE_MODE: Final[str] = "FIXFIRST_FAILURE_MODE"
ENV_LOG_LEVEL: Final[str] = "FIXFIRST_LOG_LEVEL"

RULE_NAME_MAX_LENGTH: Final[int] = 100
RECENT_VIOLATIONS_LIMIT: Final[int] = 10
