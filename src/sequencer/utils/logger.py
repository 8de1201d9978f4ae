"""
Console logger

One line per message, details as a tree below it:

    [14:23:45] SEQUENCE  · Target expired
               ├─ name: Slider
               └─ time: 2.5

Modules grab a BoundLogger at import time via get_category_logger();
configure_logger() changes the shared instance in place.
"""

from datetime import datetime
from typing import Optional
from sequencer.models.enums import LogLevel, LogCategory

RESET = '\033[0m'
DIM = '\033[2m'

CATEGORY_COLORS = {
    LogCategory.CONFIG: '\033[36m',
    LogCategory.SEQUENCE: '\033[93m',
    LogCategory.KEYFRAME: '\033[33m',
    LogCategory.TIMELINE: '\033[92m',
    LogCategory.PLAYBACK: '\033[35m',
    LogCategory.DOCUMENT: '\033[94m',
    LogCategory.EVENT: '\033[95m',
    LogCategory.SYSTEM: '\033[97m',
}

# (order, symbol, colour)
LEVELS = {
    LogLevel.DEBUG: (0, '·', DIM),
    LogLevel.INFO: (1, '✓', '\033[32m'),
    LogLevel.WARN: (2, '⚠', '\033[33m'),
    LogLevel.ERROR: (3, '✗', '\033[31m'),
}

DETAIL_INDENT = " " * 11


class Logger:
    """Prints structured messages at or above min_level."""

    def __init__(self, min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
        self.min_level = min_level
        self.use_colors = use_colors  # off for files / captured output

    def _paint(self, text: str, color: Optional[str]) -> str:
        if not self.use_colors or not color:
            return text
        return f"{color}{text}{RESET}"

    def log(self, category: LogCategory, message: str, level: LogLevel = LogLevel.INFO, **details):
        order, symbol, color = LEVELS[level]
        if order < LEVELS[self.min_level][0]:
            return

        stamp = datetime.now().strftime('[%H:%M:%S]')
        cat = self._paint(category.name.ljust(9), CATEGORY_COLORS.get(category))
        print(f"{stamp} {cat} {self._paint(symbol, color)} {self._paint(message, color)}")

        items = list(details.items())
        for i, (key, value) in enumerate(items):
            branch = "└─" if i == len(items) - 1 else "├─"
            print(f"{DETAIL_INDENT}{self._paint(branch, DIM)} {key}: {value}")

    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self, category)


class BoundLogger:
    """Logger with a fixed default category."""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self._category = category

    def log(self, message: str, level: LogLevel = LogLevel.INFO, category: Optional[LogCategory] = None, **kw):
        self._base.log(category or self._category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)

    def with_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self._base, category)


_logger = Logger()


def get_logger() -> Logger:
    return _logger


def get_category_logger(category: LogCategory) -> BoundLogger:
    return _logger.for_category(category)


def configure_logger(min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
    """Update the shared logger; bound loggers created earlier see the change."""
    _logger.min_level = min_level
    _logger.use_colors = use_colors
