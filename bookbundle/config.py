"""User configuration loaded from a TOML file."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

from bookbundle.client import DEFAULT_API_BASE_URL

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
_EXAMPLE_CONFIG = _PROJECT_ROOT / "config.example.toml"

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "bookbundle" / "config.toml"


@dataclass
class Config:
    api_base_url: str = DEFAULT_API_BASE_URL
    app_url: str = "http://localhost:5173"
    timeout: float = 15.0
    cover_size: str = "sum"


def load_config(path: Path | None = None) -> Config:
    """Load config from TOML file, falling back to defaults."""
    path = path or DEFAULT_CONFIG_PATH

    if not path.exists():
        return Config()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    defaults = Config()
    return Config(
        api_base_url=data.get("api_base_url", defaults.api_base_url),
        app_url=data.get("app_url", defaults.app_url),
        timeout=float(data.get("timeout", defaults.timeout)),
        cover_size=str(data.get("cover_size", defaults.cover_size)),
    )


def write_default_config(path: Path | None = None, force: bool = False) -> Path:
    """Write a default config file if missing.

    Args:
        path: Optional path to write the config.
        force: Overwrite existing file if True.

    Returns:
        Path to the written (or existing) config file.
    """
    path = path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.exists() and not force:
        return path

    if _EXAMPLE_CONFIG.exists():
        content = _EXAMPLE_CONFIG.read_text(encoding="utf-8")
    else:
        content = "# BookBundle configuration\n"

    path.write_text(content, encoding="utf-8")
    return path
