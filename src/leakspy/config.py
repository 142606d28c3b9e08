"""Configuration loading (files + environment variables)."""

from __future__ import annotations

import importlib
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from leakspy.errors import PatchConfigurationError
from leakspy.settings import DetectorSettings

CONFIG_NAMES = ("config.toml", "config.yaml", "config.yml")

ENV_MAPPINGS = {
    "LEAKSPY_STACK_LIMIT": "stack_limit",
    "LEAKSPY_CAPTURE_STACKS": "capture_stacks",
    "LEAKSPY_SNAPSHOT_DIR": "snapshot_dir",
    "LEAKSPY_TARGET": "target",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(slots=True)
class Config:
    """Resolved leakspy config."""

    stack_limit: int = 50
    capture_stacks: bool = True
    snapshot_dir: Path | None = None
    target: str | None = None  # "package.module:Class"

    @classmethod
    def load(cls) -> Config:
        """Load config from files and environment variables.

        Later sources override earlier ones, key by key:
        1. ~/.leakspy/config.{toml,yaml,yml}
        2. [tool.leakspy] in ./pyproject.toml
        3. ./.leakspy/config.{toml,yaml,yml}
        4. LEAKSPY_* environment variables
        """
        cwd = Path.cwd()
        sources = [
            _read_config_dir(Path.home() / ".leakspy"),
            _read_pyproject(cwd / "pyproject.toml"),
            _read_config_dir(cwd / ".leakspy"),
            _read_env(),
        ]

        data: dict[str, Any] = {}
        for source in sources:
            data.update(source)
        return cls._from_dict(data)

    def to_detector_settings(self) -> DetectorSettings:
        """Project config into detector settings."""
        return DetectorSettings(
            stack_limit=self.stack_limit,
            capture_stacks=self.capture_stacks,
        )

    def resolve_target(self) -> type | None:
        """Import the configured stream type, if any.

        Raises:
            PatchConfigurationError: If ``target`` is not an importable "module:Class"
        """
        if not self.target:
            return None
        module_name, _, attr = self.target.partition(":")
        if not module_name or not attr:
            raise PatchConfigurationError(
                f"Target must look like 'module:Class', got {self.target!r}"
            )
        try:
            module = importlib.import_module(module_name)
        except ImportError as err:
            raise PatchConfigurationError(f"Cannot import target module {module_name!r}") from err
        target = getattr(module, attr, None)
        if not isinstance(target, type):
            raise PatchConfigurationError(f"Target {self.target!r} is not a class")
        return target

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Config:
        """Create Config from dictionary, falling back to defaults on bad values."""
        try:
            stack_limit = int(data.get("stack_limit", 50))
        except (TypeError, ValueError):
            stack_limit = 50

        snapshot_dir = data.get("snapshot_dir")
        target = data.get("target")

        return cls(
            stack_limit=stack_limit,
            capture_stacks=_parse_bool(data.get("capture_stacks", True), default=True),
            snapshot_dir=Path(snapshot_dir) if snapshot_dir else None,
            target=str(target) if target else None,
        )


def _read_config_dir(config_dir: Path) -> dict[str, Any]:
    """Read the first config file found in ``config_dir``."""
    for name in CONFIG_NAMES:
        path = config_dir / name
        if not path.exists():
            continue
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f)
        with open(path) as f:
            return yaml.safe_load(f) or {}
    return {}


def _read_env() -> dict[str, Any]:
    data: dict[str, Any] = {}
    for env_var, config_key in ENV_MAPPINGS.items():
        if value := os.environ.get(env_var):
            data[config_key] = value
    return data


def _read_pyproject(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "rb") as f:
        return tomllib.load(f).get("tool", {}).get("leakspy", {})


def _parse_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return default
