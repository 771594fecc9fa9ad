"""
memfs Logger Module

Structured logging for the in-memory filesystem:
- Subsystem-specific loggers ('tree', 'resolver', 'filesystem', 'dir', 'config')
- Contextual key=value data attached to every record
- Optional console and file output
- An in-memory buffer that tests can query

Loggers are thin wrappers over the standard ``logging`` module under the
``memfs`` namespace, so they work (propagating to the host application's
logging setup) even when ``Logger.initialize`` is never called.

Author: YSNRFD
Version: 1.0.0
"""

import logging
import sys
import threading
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Optional, Any, List, TYPE_CHECKING

if TYPE_CHECKING:
    from memfs.core.config_loader import LoggingConfig


ROOT_LOGGER_NAME = 'memfs'


class LogLevel(IntEnum):
    """Log level enumeration with numeric values for comparison."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50


class LogFormatter(logging.Formatter):
    """
    Log formatter for memfs.

    Produces lines of the form::

        [2024-01-01 12:00:00.000] DEBUG    [filesystem] Created directory {path=/tmp}
    """

    # ANSI color codes for terminal output
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and self._supports_color()

    @staticmethod
    def _supports_color() -> bool:
        """Check if the terminal supports ANSI colors."""
        if not hasattr(sys.stderr, 'isatty'):
            return False
        return sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record."""
        timestamp = datetime.fromtimestamp(record.created).strftime(
            '%Y-%m-%d %H:%M:%S.%f'
        )[:-3]

        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level_display = f"{self.COLORS[level]}{level:8s}{self.RESET}"
        else:
            level_display = f"{level:8s}"

        components = [f"[{timestamp}]", level_display]

        if hasattr(record, 'subsystem'):
            components.append(f"[{record.subsystem}]")

        components.append(str(record.getMessage()))

        if hasattr(record, 'context') and record.context:
            context_str = " ".join(f"{k}={v}" for k, v in record.context.items())
            components.append(f"{{{context_str}}}")

        message = " ".join(components)

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


class MemoryLogHandler(logging.Handler):
    """
    Keeps recent log records in memory.

    Lets tests and debugging helpers inspect what the filesystem did
    without parsing console output.
    """

    def __init__(self, max_entries: int = 10000):
        super().__init__()
        self.max_entries = max_entries
        self._log_buffer: List[dict[str, Any]] = []
        self._lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        """Store log record in buffer."""
        log_entry = {
            'timestamp': record.created,
            'level': record.levelname,
            'message': record.getMessage(),
            'subsystem': getattr(record, 'subsystem', None),
            'context': getattr(record, 'context', {}),
        }

        with self._lock:
            self._log_buffer.append(log_entry)
            if len(self._log_buffer) > self.max_entries:
                self._log_buffer = self._log_buffer[-self.max_entries:]

    def get_logs(
        self,
        level: Optional[str] = None,
        subsystem: Optional[str] = None,
        limit: int = 100
    ) -> List[dict[str, Any]]:
        """Retrieve logs with optional filtering."""
        with self._lock:
            logs = self._log_buffer.copy()

        if level:
            logs = [l for l in logs if l['level'] == level]

        if subsystem:
            logs = [l for l in logs if l['subsystem'] == subsystem]

        return logs[-limit:]

    def clear(self) -> None:
        """Clear the log buffer."""
        with self._lock:
            self._log_buffer.clear()


class Logger:
    """
    Subsystem logger for memfs.

    One instance exists per subsystem name. Messages carry the
    subsystem name and an optional context dictionary, both of which
    the formatter and the memory buffer pick up.

    Example:
        >>> log = Logger('filesystem')
        >>> log.debug("Created directory", context={'path': '/tmp'})
    """

    _instances: dict[str, 'Logger'] = {}
    _lock = threading.Lock()
    _initialized = False
    _memory_handler: Optional[MemoryLogHandler] = None
    _handlers: List[logging.Handler] = []

    def __new__(cls, subsystem: str = 'filesystem') -> 'Logger':
        """Get or create a logger for a subsystem."""
        with cls._lock:
            if subsystem not in cls._instances:
                instance = super().__new__(cls)
                instance._subsystem = subsystem
                instance._logger = logging.getLogger(f'{ROOT_LOGGER_NAME}.{subsystem}')
                cls._instances[subsystem] = instance
            return cls._instances[subsystem]

    @property
    def subsystem(self) -> str:
        return self._subsystem

    @classmethod
    def initialize(
        cls,
        level: int = LogLevel.INFO,
        log_file: Optional[str] = None,
        use_colors: bool = True,
        console_output: bool = True
    ) -> None:
        """
        Attach memfs handlers to the ``memfs`` logger.

        Calling this more than once has no effect until ``shutdown``.

        Args:
            level: Minimum log level to capture
            log_file: Optional file path for log output
            use_colors: Whether to use ANSI colors in console output
            console_output: Whether to log to stderr
        """
        with cls._lock:
            if cls._initialized:
                return

            root_logger = logging.getLogger(ROOT_LOGGER_NAME)
            root_logger.setLevel(level)

            cls._memory_handler = MemoryLogHandler()
            cls._memory_handler.setLevel(level)
            cls._handlers = [cls._memory_handler]

            if console_output:
                console_handler = logging.StreamHandler(sys.stderr)
                console_handler.setLevel(level)
                console_handler.setFormatter(LogFormatter(use_colors=use_colors))
                cls._handlers.append(console_handler)

            if log_file:
                file_path = Path(log_file)
                file_path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_file)
                file_handler.setLevel(level)
                file_handler.setFormatter(LogFormatter(use_colors=False))
                cls._handlers.append(file_handler)

            for handler in cls._handlers:
                root_logger.addHandler(handler)

            cls._initialized = True

    @classmethod
    def shutdown(cls) -> None:
        """Detach and close the handlers installed by ``initialize``."""
        with cls._lock:
            root_logger = logging.getLogger(ROOT_LOGGER_NAME)
            for handler in cls._handlers:
                root_logger.removeHandler(handler)
                handler.close()
            root_logger.setLevel(logging.NOTSET)
            cls._handlers = []
            cls._memory_handler = None
            cls._initialized = False

    @classmethod
    def get_buffered_logs(
        cls,
        level: Optional[str] = None,
        subsystem: Optional[str] = None,
        limit: int = 100
    ) -> List[dict[str, Any]]:
        """Get logs from the in-memory buffer."""
        if cls._memory_handler is None:
            return []
        return cls._memory_handler.get_logs(level=level, subsystem=subsystem, limit=limit)

    def _log(
        self,
        level: int,
        message: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        """Internal logging method."""
        extra = {
            'subsystem': self._subsystem,
            'context': context or {},
        }
        self._logger.log(level, message, extra=extra)

    def is_enabled_for(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def debug(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        """Log a debug message."""
        self._log(LogLevel.DEBUG, message, context)

    def info(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, message, context)

    def warning(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        """Log a warning message."""
        self._log(LogLevel.WARNING, message, context)


def configure_logging(config: Optional['LoggingConfig'] = None) -> None:
    """
    Initialize logging from a LoggingConfig.

    Args:
        config: Logging settings; defaults to the loaded configuration
    """
    if config is None:
        from memfs.core.config_loader import get_config
        config = get_config().logging

    Logger.initialize(
        level=LogLevel[config.level.upper()],
        log_file=config.log_file,
        use_colors=config.use_colors,
        console_output=config.console_output,
    )


# Convenience function to get a logger
def get_logger(subsystem: str) -> Logger:
    """
    Get a logger for the specified subsystem.

    Args:
        subsystem: Name of the subsystem (e.g., 'tree', 'filesystem', 'dir')

    Returns:
        Logger instance for the subsystem
    """
    return Logger(subsystem)
