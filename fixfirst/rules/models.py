"""Custom rule data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Severity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class RuleCategory(str, Enum):
    TECHNICAL = "TECHNICAL"
    ONPAGE = "ONPAGE"
    STRUCTURED_DATA = "STRUCTURED_DATA"
    PERFORMANCE = "PERFORMANCE"
    LOCAL_SEO = "LOCAL_SEO"
    CONTENT = "CONTENT"
    LINKS = "LINKS"


class FailureMode(str, Enum):
    """What an evaluation error counts as."""

    OPEN = "open"
    CLOSED = "closed"


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


@dataclass
class Rule:
    id: str
    name: str
    message: str
    severity: Severity
    category: RuleCategory
    condition: Any
    description: str = ""
    enabled: bool = True
    global_: bool = False
    created_by: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "severity": self.severity.value,
            "condition": self.condition,
            "message": self.message,
            "enabled": self.enabled,
            "global": self.global_,
            "createdById": self.created_by,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Rule":
        return cls(
            id=str(payload["id"]),
            name=str(payload["name"]),
            description=str(payload.get("description") or ""),
            category=RuleCategory(payload["category"]),
            severity=Severity(payload["severity"]),
            condition=payload.get("condition"),
            message=str(payload["message"]),
            enabled=bool(payload.get("enabled", True)),
            global_=bool(payload.get("global", False)),
            created_by=payload.get("createdById"),
            created_at=str(payload.get("createdAt") or ""),
            updated_at=str(payload.get("updatedAt") or ""),
        )


@dataclass
class ProjectRule:
    project_id: str
    rule_id: str
    enabled: bool = True
    created_at: str = ""

    def as_dict(self) -> dict[str, Any]:
        return {
            "projectId": self.project_id,
            "ruleId": self.rule_id,
            "enabled": self.enabled,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ProjectRule":
        return cls(
            project_id=str(payload["projectId"]),
            rule_id=str(payload["ruleId"]),
            enabled=bool(payload.get("enabled", True)),
            created_at=str(payload.get("createdAt") or ""),
        )


@dataclass(frozen=True)
class EvaluationResult:
    passed: bool
    details: dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


@dataclass
class Violation:
    rule_id: str
    message: str
    severity: Severity
    details: dict[str, Any] = field(default_factory=dict)
    audit_id: Optional[str] = None
    id: str = ""
    created_at: str = ""

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "auditId": self.audit_id,
            "ruleId": self.rule_id,
            "message": self.message,
            "severity": self.severity.value,
            "details": self.details,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Violation":
        return cls(
            id=str(payload.get("id") or ""),
            audit_id=payload.get("auditId"),
            rule_id=str(payload["ruleId"]),
            message=str(payload["message"]),
            severity=Severity(payload["severity"]),
            details=dict(payload.get("details") or {}),
            created_at=str(payload.get("createdAt") or ""),
        )


@dataclass(frozen=True)
class RuleTestResult:
    success: bool
    passed: bool = False
    message: str = ""
    error: Optional[str] = None

    def as_dict(self) -> dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {"success": True, "passed": self.passed, "message": self.message}
