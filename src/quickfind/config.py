"""Configuration for quickfind."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_INCLUDE_DIRS = ("Documents", "Projects", "Code", "Desktop")

DEFAULT_IGNORE = [
    "**/.*",
    "**/.git",
    "**/node_modules/**",
    "**/bower_components/**",
    "**/.venv/**",
    "**/venv/**",
    "**/__pycache__/**",
    "**/.mypy_cache/**",
    "**/.pytest_cache/**",
    "**/.tox/**",
    "**/.eggs/**",
    "**/*.egg-info/**",
    "**/target/**",
    "**/.cargo/**",
    "**/bin/**",
    "**/pkg/**",
    "**/build/**",
    "**/out/**",
    "**/.gradle/**",
    "**/CMakeFiles/**",
    "**/cmake-build-*/**",
    "**/.env/**",
    "**/.direnv/**",
    "**/.cache/**",
    "**/.local/**",
    "**/.uv/**",
    "**/.yarn/**",
    "**/.pnpm-store/**",
    "**/.next/**",
    "**/dist/**",
    "**/coverage/**",
]


class ConfigError(Exception):
    """Raised when the config file cannot be read or is invalid."""


def _default_include() -> list[str]:
    home = Path.home()
    return [str(home / name) for name in DEFAULT_INCLUDE_DIRS]


class Config(BaseModel):
    """User configuration stored in ``conf.toml``."""

    include: list[str] = Field(default_factory=_default_include)
    ignore: list[str] = Field(default_factory=lambda: list(DEFAULT_IGNORE))
    depth: int = Field(default=10, ge=1)
    highlight_color: str | None = None
    editor: str | None = None

    @field_validator("include")
    @classmethod
    def _expand_user(cls, value: list[str]) -> list[str]:
        return [str(Path(item).expanduser()) for item in value]


@dataclass(frozen=True)
class AppPaths:
    """Filesystem locations used by the application."""

    config_dir: Path = field(default_factory=lambda: Path.home() / ".search")
    data_dir: Path = field(default_factory=lambda: Path.home() / ".quickfind")

    @property
    def config_path(self) -> Path:
        return self.config_dir / "conf.toml"

    @property
    def db_path(self) -> Path:
        return self.data_dir / "db.sqlite"

    @property
    def log_path(self) -> Path:
        return self.data_dir / "quickfind.log"


def load_config(config_path: Path) -> Config:
    """Load the config file, writing the defaults first if it does not exist.

    Raises:
        ConfigError: The file exists but cannot be read or validated.
    """
    if not config_path.exists():
        config = Config()
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            config_path.write_text(dump_config(config), encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Could not write default config to {config_path}: {exc}") from exc
        logger.info("Created default config at %s", config_path)
        return config

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Could not read config {config_path}: {exc}") from exc
    try:
        return Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config {config_path}: {exc}") from exc


def dump_config(config: Config) -> str:
    """Render a config as TOML. Unset optional values are left out."""
    lines: list[str] = []
    for key, value in config.model_dump(exclude_none=True).items():
        if isinstance(value, list):
            lines.append(f"{key} = [")
            lines.extend(f"    {_toml_string(item)}," for item in value)
            lines.append("]")
        elif isinstance(value, int):
            lines.append(f"{key} = {value}")
        else:
            lines.append(f"{key} = {_toml_string(str(value))}")
    return "\n".join(lines) + "\n"


_TOML_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def _toml_string(value: str) -> str:
    parts = []
    for char in value:
        if char in _TOML_ESCAPES:
            parts.append(_TOML_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            parts.append(f"\\u{ord(char):04X}")
        else:
            parts.append(char)
    return '"' + "".join(parts) + '"'
