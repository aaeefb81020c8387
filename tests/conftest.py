import sys
import json
from pathlib import Path
from typing import Any

from click.testing import CliRunner
import pytest
import structlog


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    for name in (
        "FIXFIRST_USER",
        "FIXFIRST_ROLE",
        "FIXFIRST_FAILURE_MODE",
        "FIXFIRST_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_json():
    def _write(path: Path, payload: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fixfirst_root(tmp_path: Path) -> Path:
    return tmp_path / ".config" / "fixfirst"


@pytest.fixture
def rule_payload() -> dict:
    return {
        "name": "low-performance",
        "description": "Flag slow pages",
        "category": "PERFORMANCE",
        "severity": "WARNING",
        "message": "Performance score is too low",
        "condition": {
            "logic": "AND",
            "conditions": [
                {"field": "performance.score", "operator": "greater_than", "value": 50}
            ],
        },
    }


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("XDG_CONFIG_HOME", str(tmp_path / ".config"))
            env.setdefault("COLUMNS", "200")
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
