"""Logging utilities for Layerizer."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog

# File records carry a timestamp; console records are the bare JSON event.
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_PROCESSORS: list[structlog.types.Processor] = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.JSONRenderer(sort_keys=True),
]

# Handlers installed by configure_logging, replaced on reconfiguration.
_installed_handlers: list[logging.Handler] = []


@dataclass
class ProcessingStats:
    """Statistics from a pipeline run."""

    layer_count: int = 0
    processed_count: int = 0
    empty_count: int = 0
    path_count: int = 0
    bridges_added: int = 0
    errors: list[tuple[int, str]] = field(default_factory=list)
    layer_timings_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_layer_time_ms(self) -> float | None:
        """Average per-layer processing time."""
        if not self.layer_timings_ms:
            return None
        return sum(self.layer_timings_ms) / len(self.layer_timings_ms)


def _level(name: str) -> int:
    """Resolve a level name such as ``"warning"`` to its numeric value."""
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Route structlog events through the stdlib root logger.

    Calling this again replaces the handlers of the previous call, so a
    process can reconfigure between runs.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        The "layerizer" logger

    Raises:
        ValueError: If a level name is not a logging level
    """
    handlers: list[logging.Handler] = []

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(_level(file_level))
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else _level(console_level))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers[:] = handlers
    for handler in handlers:
        root_logger.addHandler(handler)

    structlog.configure(
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("layerizer")
    logger.debug(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        console_level="ERROR" if quiet else console_level.upper(),
        file_level=file_level.upper(),
    )
    return logger


class ProcessingLogger:
    """Logger for tracking pipeline progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_stage(self, stage: str, progress: float, message: str) -> None:
        """Log a pipeline stage transition."""
        self._logger.debug("Pipeline stage", stage=stage, progress=round(progress, 1), message=message)

    def log_layer_complete(
        self,
        order: int,
        path_count: int,
        bridges_added: int,
        duration_ms: float,
    ) -> None:
        """Log a finished layer."""
        self._logger.info(
            "Layer processed",
            layer=order,
            paths=path_count,
            bridges=bridges_added,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.path_count += path_count
        self._stats.bridges_added += bridges_added
        self._stats.layer_timings_ms.append(duration_ms)
        if path_count == 0:
            self._stats.empty_count += 1

    def log_layer_error(
        self,
        order: int,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log layer processing error."""
        self._logger.error(
            "Layer processing failed",
            layer=order,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.errors.append((order, str(error)))

    def log_cleanup(self, order: int, area_before: int, area_after: int) -> None:
        """Log mask cleanup results."""
        self._logger.debug(
            "Mask cleaned",
            layer=order,
            area_before=area_before,
            area_after=area_after,
        )

    def log_bridge_placement(
        self,
        order: int,
        island_id: int,
        length: float,
        angle: float,
    ) -> None:
        """Log bridge placement details."""
        self._logger.debug(
            "Bridge placed",
            layer=order,
            island=island_id,
            length=round(length, 2),
            angle=round(angle, 3),
        )

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
