"""YAML config loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from lib_bench.config.domain.condition import ConditionConfig
from lib_bench.config.domain.config import BenchConfig
from lib_bench.config.domain.observer import ConfigObserver
from lib_bench.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from lib_bench.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
    MissingTemplatesError,
)


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns a BenchConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> BenchConfig:
        """
        Load and validate a BenchConfig.

        Relative task, template and skills paths are anchored at the directory
        holding the YAML file.

        Raises:
            ConfigLoadError: if the file does not exist or cannot be read.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            ConfigValidationError: if the YAML is malformed, the schema is violated,
                or any condition template is missing (MissingTemplatesError,
                all collected first).
        """
        raw = _parse_yaml(path=path)
        missing = collect_missing_vars(raw)
        if missing:
            raise MissingEnvVarsError(missing)
        cfg = _build_config(resolved=interpolate(raw))
        cfg = _anchor_paths(cfg=cfg, base_dir=path.parent)
        _check_condition_templates(cfg=cfg)
        if cfg.execution.keep_workdirs:
            self._observer.config_keep_workdirs_warning(
                temp_base_dir=str(cfg.execution.temp_base_dir)
            )
        self._observer.config_loaded(name=cfg.name, version=cfg.version)
        return cfg


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ConfigLoadError(path=path) from exc
    except OSError as exc:
        raise ConfigLoadError(path=path, reason=exc.strerror or str(exc)) from exc
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"invalid YAML: {exc}") from exc


def _build_config(resolved: Any) -> BenchConfig:
    try:
        return BenchConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc


def _anchor(path: Path, base_dir: Path) -> Path:
    path = path.expanduser()
    return path if path.is_absolute() else base_dir / path


def _anchor_paths(cfg: BenchConfig, base_dir: Path) -> BenchConfig:
    conditions: dict[str, ConditionConfig] = {}
    for name, condition in cfg.conditions.items():
        skills_dir = condition.skills_dir
        conditions[name] = condition.model_copy(
            update={
                "config_template": _anchor(condition.config_template, base_dir),
                "skills_dir": _anchor(skills_dir, base_dir) if skills_dir else None,
            }
        )
    tasks = cfg.tasks.model_copy(update={"path": _anchor(cfg.tasks.path, base_dir)})
    return cfg.model_copy(update={"tasks": tasks, "conditions": conditions})


def _check_condition_templates(cfg: BenchConfig) -> None:
    """Raise MissingTemplatesError listing ALL conditions whose template is missing."""
    missing = {
        name: condition.config_template
        for name, condition in cfg.conditions.items()
        if not condition.config_template.is_file()
    }
    if missing:
        raise MissingTemplatesError(templates=missing)
