# Navboard — configuration
# Values come from config.yaml, then NAV_* environment variables, then CLI args.

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional

CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "config.yaml"

ENV_OVERRIDES = {
    "NAV_ADMIN_TOKEN": "admin_token",
    "NAV_DB": "db_path",
    "NAV_CARDS_KEY": "cards_key",
    "NAV_GROUPS_KEY": "groups_key",
}


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""
    pass


@dataclass
class NavConfig:
    """Runtime configuration for the navigation server."""

    # Shared secret for mutating API calls ("" = admin API disabled)
    admin_token: str = ""

    # Storage
    db_path: str = "~/.local/share/navboard/navboard.db"
    use_memory: bool = False
    cards_key: str = "nav_items"
    groups_key: str = "nav_groups"
    seed_groups: List[str] = field(default_factory=list)

    # HTTP
    host: str = "127.0.0.1"
    port: int = 8787

    def resolve_paths(self):
        self.db_path = str(Path(self.db_path).expanduser())

    def apply_env(self, environ=None):
        """Overlay NAV_* environment variables."""
        environ = os.environ if environ is None else environ
        for var, attr in ENV_OVERRIDES.items():
            value = environ.get(var)
            if value:
                setattr(self, attr, value.strip())

    def validate(self):
        # Unquoted YAML scalars (admin_token: 12345) arrive as numbers
        self.admin_token = "" if self.admin_token is None else str(self.admin_token)
        if not self.cards_key or not self.groups_key:
            raise ConfigError("cards_key and groups_key must be non-empty")
        if self.cards_key == self.groups_key:
            raise ConfigError("cards_key and groups_key must differ")
        if not isinstance(self.seed_groups, list):
            raise ConfigError("seed_groups must be a list of strings")
        try:
            self.port = int(self.port)
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid port: {self.port!r}")

    @classmethod
    def load(cls, path: Optional[str] = None, environ=None) -> "NavConfig":
        """Load config from YAML file, falling back to defaults."""
        cfg_path = Path(path) if path else CONFIG_PATH
        if cfg_path.exists():
            with open(cfg_path, "r") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ConfigError(f"{cfg_path} must contain a mapping")
            cfg = cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
        elif path:
            raise ConfigError(f"Config file not found: {cfg_path}")
        else:
            cfg = cls()
        cfg.apply_env(environ)
        cfg.resolve_paths()
        cfg.validate()
        return cfg
