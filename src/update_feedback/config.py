"""Configuration management."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

APP_NAME = "update-feedback"
LEGACY_IGNORE_FILE = "fedora-update-feedback.ignored"


def cache_dir() -> Path:
    """Get the per-user cache directory."""
    xdg = os.getenv("XDG_CACHE_HOME")
    return Path(xdg) if xdg else Path.home() / ".cache"


def config_dir() -> Path:
    """Get the per-user configuration directory."""
    xdg = os.getenv("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else Path.home() / ".config"


@dataclass
class AccountConfig:
    """Update tracker account settings."""
    username: Optional[str] = None


@dataclass
class ChecksConfig:
    """Which additional update categories to look at."""
    check_pending: bool = False
    check_obsoleted: bool = False
    check_unpushed: bool = False


@dataclass
class PathsConfig:
    """Path settings."""
    ignore_file: Path = field(default_factory=lambda: cache_dir() / APP_NAME / "ignored.yaml")
    legacy_ignore_file: Path = field(default_factory=lambda: cache_dir() / LEGACY_IGNORE_FILE)


@dataclass
class BodhiConfig:
    """Update tracker API settings."""
    url: str = "https://bodhi.fedoraproject.org"
    timeout: float = 60.0
    page_size: int = 50


@dataclass
class EditorConfig:
    """External editor settings."""
    command: Optional[str] = None


@dataclass
class Settings:
    """Application settings."""
    
    account: AccountConfig = field(default_factory=AccountConfig)
    checks: ChecksConfig = field(default_factory=ChecksConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    bodhi: BodhiConfig = field(default_factory=BodhiConfig)
    editor: EditorConfig = field(default_factory=EditorConfig)
    
    @property
    def username(self) -> Optional[str]:
        return self.account.username
    
    @property
    def ignore_file(self) -> Path:
        return self.paths.ignore_file
    
    @property
    def legacy_ignore_file(self) -> Path:
        return self.paths.legacy_ignore_file


def default_config_path() -> Path:
    return config_dir() / APP_NAME / "config.yaml"


def load_config(config_path: Path) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}
    
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_legacy_username(path: Optional[Path] = None) -> Optional[str]:
    """Read the username from the legacy ``~/.fedora.upn`` file."""
    path = path or Path.home() / ".fedora.upn"
    
    if not path.exists():
        return None
    
    username = path.read_text(encoding="utf-8").strip()
    return username or None


def get_settings(config_path: Optional[Path] = None) -> Settings:
    """Get application settings from YAML config and environment."""
    # Load YAML config
    config = load_config(config_path or default_config_path())
    
    settings = Settings()
    
    # Apply YAML config
    if "account" in config:
        for key, value in config["account"].items():
            setattr(settings.account, key, value)
    
    if "checks" in config:
        for key, value in config["checks"].items():
            setattr(settings.checks, key, bool(value))
    
    if "paths" in config:
        for key, value in config["paths"].items():
            setattr(settings.paths, key, Path(value).expanduser())
    
    if "bodhi" in config:
        for key, value in config["bodhi"].items():
            setattr(settings.bodhi, key, value)
    
    if "editor" in config:
        for key, value in config["editor"].items():
            setattr(settings.editor, key, value)
    
    # Environment overrides
    username = os.getenv("UPDATE_FEEDBACK_USERNAME")
    if username:
        settings.account.username = username
    
    bodhi_url = os.getenv("BODHI_URL")
    if bodhi_url:
        settings.bodhi.url = bodhi_url
    
    return settings


def resolve_username(override: Optional[str], settings: Settings) -> Optional[str]:
    """Pick the username from the CLI, then settings, then the legacy file."""
    return override or settings.username or get_legacy_username()
