"""Configuration for projx."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

DEFAULT_TODO_TOKENS = ("TODO", "FIXME", "XXX")
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "projx" / "config.toml"


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    cache_dir: Path = field(default_factory=lambda: Path.home() / ".cache" / "projx")
    selection_strategy: str = "strict"
    todo_tokens: tuple[str, ...] = DEFAULT_TODO_TOKENS
    project_dirs: tuple[Path, ...] = ()

    @property
    def db_path(self) -> Path:
        return self.cache_dir / "workspace.db"


def load_config_file(path: Path) -> dict[str, object]:
    """Load an optional TOML config file; a missing file yields an empty table."""
    if not path.is_file():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def merge_config(base: Config, payload: dict[str, object]) -> Config:
    """Apply values from a parsed config file on top of ``base``."""
    updates: dict[str, object] = {}

    if "cache_dir" in payload:
        updates["cache_dir"] = Path(_string(payload["cache_dir"], "cache_dir")).expanduser()
    if "selection_strategy" in payload:
        updates["selection_strategy"] = _string(
            payload["selection_strategy"], "selection_strategy"
        )
    if "todo_tokens" in payload:
        tokens = _tuple_of_strings(payload["todo_tokens"], "todo_tokens")
        if not tokens:
            raise ValueError("Config field 'todo_tokens' must not be empty.")
        updates["todo_tokens"] = tokens
    if "project_dirs" in payload:
        updates["project_dirs"] = tuple(
            Path(item).expanduser()
            for item in _tuple_of_strings(payload["project_dirs"], "project_dirs")
        )

    return replace(base, **updates)  # type: ignore[arg-type]


def load_config(path: Path | None = None, **overrides: object) -> Config:
    """Load effective config: defaults -> config file -> explicit overrides.

    Overrides whose value is ``None`` are ignored so CLI options can be passed
    through unconditionally.
    """
    payload = load_config_file(path or DEFAULT_CONFIG_PATH)
    config = merge_config(Config(), payload)
    explicit = {key: value for key, value in overrides.items() if value is not None}
    if explicit:
        config = replace(config, **explicit)  # type: ignore[arg-type]
    return config


def _string(value: object, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    return value


def _tuple_of_strings(value: object, name: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{name}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{name}' must contain only strings.")
        output.append(item)
    return tuple(output)
