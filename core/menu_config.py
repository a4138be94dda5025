"""Menu Configuration - Single Authority for Menu Defaults

Mirrors the BrowserConfig pattern. The menu core reads from here, never decides policy.

RESPONSIBILITY:
- Load menu.yaml
- Provide get() singleton
- Expose typed config values

DOES NOT:
- Track frames (MenuManager's job)
- Send or edit messages (gui.message's job)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional, Literal


@dataclass(frozen=True)
class MenuSettings:
    """Immutable menu configuration snapshot."""
    time_limit_ms: int
    send_as: Optional[Literal["Reply", "FollowUp"]]  # None = post to channel
    collector_type: Literal["Button", "String", "Both"]
    default_pager_id: str
    max_action_rows: int
    paging_row_emoji: bool
    paging_row_cancel: bool


class MenuConfig:
    """Singleton menu configuration authority.

    Usage:
        settings = MenuConfig.get().settings
        timeout = settings.time_limit_ms
    """

    _instance: Optional["MenuConfig"] = None
    _settings: Optional[MenuSettings] = None

    # Defaults (used if yaml missing or invalid)
    DEFAULTS = {
        "time_limit_ms": 60_000,
        "send_as": None,
        "collector_type": "Button",
        "default_pager_id": "0",
        "max_action_rows": 5,
        "paging_row_emoji": False,
        "paging_row_cancel": False,
    }

    CONFIG_PATH = Path(__file__).parent.parent / "config" / "menu.yaml"

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load()
        return cls._instance

    @classmethod
    def get(cls) -> "MenuConfig":
        """Get singleton instance."""
        return cls()

    @property
    def settings(self) -> MenuSettings:
        """Get current menu settings."""
        if self._settings is None:
            self._load()
        return self._settings

    def _load(self) -> None:
        """Load configuration from menu.yaml."""
        config_path = self.CONFIG_PATH

        raw_config: Dict[str, Any] = {}

        if config_path.exists():
            try:
                import yaml
                with open(config_path, encoding="utf-8") as f:
                    full_config = yaml.safe_load(f) or {}
                    raw_config = full_config.get("menu", {}) or {}
                    logging.info(f"Loaded menu config from {config_path}")
            except Exception as e:
                logging.warning(f"Failed to load menu.yaml: {e}, using defaults")
        else:
            logging.info(f"No menu.yaml found at {config_path}, using defaults")

        unknown = set(raw_config) - set(self.DEFAULTS)
        if unknown:
            logging.warning(f"Ignoring unknown menu settings: {sorted(unknown)}")

        merged = {**self.DEFAULTS, **{k: v for k, v in raw_config.items() if k in self.DEFAULTS}}

        if merged["collector_type"] not in ("Button", "String", "Both"):
            logging.warning(
                f"Invalid collector_type {merged['collector_type']!r}, using 'Button'"
            )
            merged["collector_type"] = "Button"
        if merged["send_as"] not in (None, "Reply", "FollowUp"):
            logging.warning(f"Invalid send_as {merged['send_as']!r}, posting to channel")
            merged["send_as"] = None

        self._settings = MenuSettings(
            time_limit_ms=int(merged["time_limit_ms"]),
            send_as=merged["send_as"],
            collector_type=merged["collector_type"],
            default_pager_id=str(merged["default_pager_id"]),
            max_action_rows=int(merged["max_action_rows"]),
            paging_row_emoji=bool(merged["paging_row_emoji"]),
            paging_row_cancel=bool(merged["paging_row_cancel"]),
        )

        logging.debug(f"MenuConfig: {self._settings}")

    def reload(self) -> None:
        """Force reload configuration (for testing)."""
        self._load()


def get_menu_settings() -> MenuSettings:
    """Shortcut for MenuConfig.get().settings."""
    return MenuConfig.get().settings
