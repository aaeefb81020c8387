from pathlib import Path


class FixFirstError(Exception):
    """Base user-facing application error."""


class FixFirstFileError(FixFirstError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class InvalidJsonFormatError(FixFirstFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid JSON format ({detail})")


class InvalidConfigSchemaError(FixFirstFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config schema ({detail})")


class InvalidDataFileError(FixFirstFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Cannot read data file ({detail})")


class RuleNotFoundError(FixFirstError):
    def __init__(self, rule_id: str) -> None:
        self.rule_id = rule_id
        super().__init__(f"Rule not found: {rule_id}")


class RuleAlreadyAssignedError(FixFirstError):
    def __init__(self, project_id: str, rule_id: str) -> None:
        self.project_id = project_id
        self.rule_id = rule_id
        super().__init__(f"Rule {rule_id} already assigned to project {project_id}")


class RuleNotAssignedError(FixFirstError):
    def __init__(self, project_id: str, rule_id: str) -> None:
        self.project_id = project_id
        self.rule_id = rule_id
        super().__init__(f"Rule {rule_id} is not assigned to project {project_id}")


class PermissionDeniedError(FixFirstError):
    """Raised when the acting user may not touch a rule."""


class InvalidRulePayloadError(FixFirstError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid rule data ({detail})")


class ConditionParseError(FixFirstError):
    """Raised when stored condition JSON does not form a valid tree."""

    def __init__(self, detail: str, path: str = "") -> None:
        self.detail = detail
        self.path = path
        super().__init__(f"{detail} at {path}" if path else detail)
