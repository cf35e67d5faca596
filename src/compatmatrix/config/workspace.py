from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, Field, field_validator

WORKSPACE_FILENAME = "compat.yaml"
VALID_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def load_yaml(p: Path, *, require_mapping: bool = True):
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise FileNotFoundError(f"YAML file not found: {p}") from e
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {p}: {e}") from e

    if data is None:
        return {}
    if require_mapping and not isinstance(data, dict):
        raise TypeError(
            f"Top-level YAML in {p} must be a mapping, got {type(data).__name__}")
    return data


def _strip_or_none(value: object):
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        return text if text else None
    return value


class SharedDefaults(BaseModel):
    log_level: Optional[str] = Field(default=None, description="DEFAULT LOG LEVEL")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value):
        value = _strip_or_none(value)
        if value is None:
            return None
        name = str(value).upper()
        if name not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}, got {value!r}"
            )
        return name


class RenderDefaults(BaseModel):
    output: Optional[str] = Field(default=None, description="HTML destination path")
    filter: Optional[str] = Field(
        default=None,
        description="none | unique:<exporter> | better:<a>:<b>",
    )

    @field_validator("output", "filter", mode="before")
    @classmethod
    def _normalize(cls, value):
        return _strip_or_none(value)


class WorkspaceConfig(BaseModel):
    source: Optional[str] = None
    title: str = "Compatibility Matrix"
    stylesheet: Optional[str] = None
    shared: SharedDefaults = Field(default_factory=SharedDefaults)
    render: RenderDefaults = Field(default_factory=RenderDefaults)

    @field_validator("source", "stylesheet", mode="before")
    @classmethod
    def _normalize(cls, value):
        return _strip_or_none(value)


@dataclass
class WorkspaceContext:
    file_path: Path
    config: WorkspaceConfig

    @property
    def root(self) -> Path:
        return self.file_path.parent

    def _resolve(self, raw: Optional[str]) -> Optional[Path]:
        if not raw:
            return None
        candidate = Path(raw)
        return (
            candidate.resolve()
            if candidate.is_absolute()
            else (self.root / candidate).resolve()
        )

    def resolve_source(self, default: Optional[str] = None) -> Optional[str]:
        raw = self.config.source or default
        if not raw:
            return None
        if urlparse(raw).scheme.lower() in {"http", "https"}:
            return raw
        return str(self._resolve(raw))

    def resolve_output(self, default: Optional[str] = None) -> Optional[Path]:
        return self._resolve(self.config.render.output or default)


def parse_workspace(data: Any) -> WorkspaceConfig:
    if not isinstance(data, dict):
        raise TypeError(f"{WORKSPACE_FILENAME} must define a mapping at the top level")
    # Allow users to set shared/render to null to fall back to defaults
    for key in ("shared", "render"):
        if key in data and data[key] is None:
            data.pop(key)
    return WorkspaceConfig.model_validate(data)


def load_workspace_context(start_dir: Optional[Path] = None) -> Optional[WorkspaceContext]:
    """Search from start_dir upward for compat.yaml and return parsed config."""
    directory = (start_dir or Path.cwd()).resolve()
    for path in [directory, *directory.parents]:
        candidate = path / WORKSPACE_FILENAME
        if candidate.is_file():
            cfg = parse_workspace(load_yaml(candidate))
            return WorkspaceContext(file_path=candidate, config=cfg)
    return None
