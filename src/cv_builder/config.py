"""Application configuration loaded from config.yaml."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

CONFIG_ENV_VAR = "CV_BUILDER_CONFIG"


@dataclass(frozen=True)
class AutosaveConfig:
    debounce_seconds: float = 2.0
    retry_base_delay: float = 1.0
    retry_max_delay: float = 30.0
    max_failures: int = 5

    def __post_init__(self) -> None:
        if not 0 < self.debounce_seconds <= 60:
            raise ValueError(
                f"debounce_seconds must be in (0, 60], got {self.debounce_seconds}"
            )
        if self.retry_base_delay <= 0:
            raise ValueError(f"retry_base_delay must be > 0, got {self.retry_base_delay}")
        if self.retry_max_delay < self.retry_base_delay:
            raise ValueError(
                "retry_max_delay must be >= retry_base_delay "
                f"({self.retry_max_delay} < {self.retry_base_delay})"
            )
        if not 1 <= self.max_failures <= 20:
            raise ValueError(f"max_failures must be in [1, 20], got {self.max_failures}")


@dataclass(frozen=True)
class StorageConfig:
    db_path: str = "~/.cv-builder/documents.db"
    retry_attempts: int = 3

    def __post_init__(self) -> None:
        if not 1 <= self.retry_attempts <= 10:
            raise ValueError(f"retry_attempts must be in [1, 10], got {self.retry_attempts}")

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class ExportConfig:
    default_template: str = "dublin"
    output_dir: str = "./output"

    def __post_init__(self) -> None:
        from cv_builder.templates import TEMPLATES

        available = sorted(TEMPLATES)
        if self.default_template not in available:
            raise ValueError(
                f"default_template {self.default_template!r} is not one of {available}"
            )

    @property
    def resolved_output_dir(self) -> Path:
        return Path(self.output_dir).expanduser()


@dataclass(frozen=True)
class ActivityConfig:
    enabled: bool = True
    db_path: str = "~/.cv-builder/activity.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    autosave: AutosaveConfig = field(default_factory=AutosaveConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    activity: ActivityConfig = field(default_factory=ActivityConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None and os.environ.get(CONFIG_ENV_VAR):
        path = os.environ[CONFIG_ENV_VAR]
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        autosave=AutosaveConfig(**raw.get("autosave", {})),
        storage=StorageConfig(**raw.get("storage", {})),
        export=ExportConfig(**raw.get("export", {})),
        activity=ActivityConfig(**raw.get("activity", {})),
    )
