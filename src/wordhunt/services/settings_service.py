"""Service for the player's game settings."""
import logging
from dataclasses import fields, replace
from typing import Any

from wordhunt.models.records import Loaded, PlayerSettings
from wordhunt.services.storage_service import SETTINGS_KEY, ProgressStore

logger = logging.getLogger(__name__)


class SettingsService:
    """Loads and stores player settings."""

    def __init__(self, store: ProgressStore):
        """Initialize the service with the store."""
        self.store = store

    def load_settings(self) -> Loaded[PlayerSettings]:
        """Get settings together with how they were obtained."""
        return self.store.load(SETTINGS_KEY, PlayerSettings, PlayerSettings)

    def get_settings(self) -> PlayerSettings:
        """Get the player's settings, or defaults."""
        return self.load_settings().value

    def save_settings(self, player_settings: PlayerSettings) -> None:
        """Persist the player's settings.

        Raises ValueError if a value would not read back, so a bad write
        never replaces the stored settings.
        """
        PlayerSettings.from_data(player_settings.to_data())
        self.store.save(SETTINGS_KEY, player_settings)

    def update_setting(self, name: str, value: Any) -> PlayerSettings:
        """Change a single setting."""
        if name not in {f.name for f in fields(PlayerSettings)}:
            raise ValueError(f"Unknown setting: {name}")

        player_settings = replace(self.get_settings(), **{name: value})
        self.save_settings(player_settings)
        logger.debug(f"Setting updated: {name}={value!r}")
        return player_settings
