"""Default engine settings for new players."""

from typing import Optional

from gamelife.models.settings import EngineSettings


class EngineSettingsManager:
    """Manages the settings applied to newly created players."""

    def __init__(self, initial_settings: Optional[EngineSettings] = None) -> None:
        self._settings = initial_settings or EngineSettings()

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    def update_settings(self, new_settings: EngineSettings) -> None:
        self._settings = new_settings
