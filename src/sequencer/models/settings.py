"""
Settings schemas - Pydantic models for the YAML configuration
"""

from pydantic import BaseModel, Field, field_validator

from sequencer.models.enums import ErrorPolicy, LogLevel
from sequencer.utils.enum_helper import EnumHelper


class LoggingSettings(BaseModel):
    """Console logger configuration"""
    level: LogLevel = Field(LogLevel.INFO, description="Minimum level: DEBUG, INFO, WARN, ERROR")
    use_colors: bool = Field(True, description="ANSI colors (disable when piping to a file)")

    @field_validator("level", mode="before")
    @classmethod
    def parse_level(cls, value):
        return EnumHelper.coerce(LogLevel, value)


class PlaybackSettings(BaseModel):
    """Virtual clock configuration"""
    fps: float = Field(30.0, gt=0, description="Frames per second of the player")
    loop: bool = Field(False, description="Restart from the first frame after the last one")


class TimelineSettings(BaseModel):
    """Root configuration"""
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    error_policy: ErrorPolicy = Field(
        ErrorPolicy.SKIP,
        description="raise: abort the frame on the first failing sequence, skip: log and continue"
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("error_policy", mode="before")
    @classmethod
    def parse_error_policy(cls, value):
        return EnumHelper.coerce(ErrorPolicy, value)
