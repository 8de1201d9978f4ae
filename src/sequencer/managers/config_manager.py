"""
Config Manager

Loads the YAML configuration, validates it into TimelineSettings and builds
configured Timeline / TimelinePlayer instances.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union, TYPE_CHECKING

import yaml
from pydantic import ValidationError

from sequencer.models.enums import LogCategory
from sequencer.models.errors import ConfigError
from sequencer.models.settings import TimelineSettings
from sequencer.services.player import TimelinePlayer
from sequencer.services.timeline import Timeline
from sequencer.utils.logger import configure_logger, get_category_logger

if TYPE_CHECKING:
    from sequencer.models.document import Document
    from sequencer.services.event_bus import EventBus

log = get_category_logger(LogCategory.CONFIG)

DEFAULTS_PATH = Path(__file__).parent.parent / "config" / "defaults.yaml"


class ConfigManager:
    """
    Configuration manager with factory-defaults fallback

    Example:
        config = ConfigManager("sequencer.yaml")
        config.load()
        config.apply_logging()

        timeline = config.create_timeline(doc)
        player = config.create_player(timeline, event_bus)
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None, defaults_path: Union[str, Path] = DEFAULTS_PATH):
        """
        Args:
            config_path: User config file (None = factory defaults only)
            defaults_path: Factory defaults fallback
        """
        self.config_path = Path(config_path) if config_path is not None else None
        self.defaults_path = Path(defaults_path)
        self.data: Dict[str, Any] = {}
        self.settings: TimelineSettings = TimelineSettings()

    def load(self) -> TimelineSettings:
        """
        Load and validate configuration

        Process:
        1. Load config_path (if given)
        2. On any failure, log it and fall back to factory defaults
        3. Invalid factory defaults raise ConfigError

        Returns:
            Validated settings
        """
        if self.config_path is not None:
            try:
                self.data = self._read_yaml(self.config_path)
                self.settings = TimelineSettings.model_validate(self.data)
                log.info("Configuration loaded", path=str(self.config_path))
                return self.settings
            except (OSError, yaml.YAMLError, ValidationError) as ex:
                log.error("Failed to load config", path=str(self.config_path), error=str(ex), error_type=type(ex).__name__)
                log.warn("Falling back to factory defaults")

        try:
            self.data = self._read_yaml(self.defaults_path)
            self.settings = TimelineSettings.model_validate(self.data)
        except (OSError, yaml.YAMLError, ValidationError) as ex:
            raise ConfigError(f"Invalid factory defaults {self.defaults_path}: {ex}") from ex

        log.info("Factory defaults loaded", path=str(self.defaults_path))
        return self.settings

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        # Empty file = all defaults
        return data or {}

    def apply_logging(self) -> None:
        """Push the logging section into the logger singleton."""
        configure_logger(
            min_level=self.settings.logging.level,
            use_colors=self.settings.logging.use_colors,
        )

    def create_timeline(self, document: Optional["Document"] = None) -> Timeline:
        return Timeline(document, error_policy=self.settings.error_policy)

    def create_player(self, timeline: Timeline, event_bus: Optional["EventBus"] = None) -> TimelinePlayer:
        return TimelinePlayer(
            timeline,
            event_bus,
            fps=self.settings.playback.fps,
            loop=self.settings.playback.loop,
        )
