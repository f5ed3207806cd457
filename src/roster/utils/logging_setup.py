"""
Logging for the roster core.

Every module logs under the ``roster`` namespace (``roster.patterns.expander``,
``roster.matching.skills``, ``roster.history.manager``). ``setup_logging``
attaches a console handler and an optional size-rotated file to the
``roster`` logger; library code never installs handlers itself.

    TRACE    calls and results of @log_function_call functions
    DEBUG    skipped days, per-candidate checks, history cursor moves
    INFO     generation and matching phases, commits, restores
    WARNING  unstaffed shifts, unusable patterns, discarded autosaves
    ERROR    autosave write failures, rejected commits
"""
import functools
import logging
import sys
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Optional, TextIO

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

PACKAGE_LOGGER = "roster"
CONSOLE_FORMAT = "[%(asctime)s] %(levelname)-7s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"


def level_number(name: Optional[str], default: int = logging.INFO) -> int:
    """Numeric level for a name such as "debug" or "TRACE"; unknown names give ``default``."""
    if not name:
        return default
    value = logging.getLevelName(str(name).strip().upper())
    return value if isinstance(value, int) else default


class ConsoleFormatter(logging.Formatter):
    """Console lines, coloured by level when writing to a terminal."""

    COLORS = {
        TRACE: "90",
        logging.DEBUG: "36",
        logging.INFO: "32",
        logging.WARNING: "33",
        logging.ERROR: "31",
        logging.CRITICAL: "35",
    }

    def __init__(self, use_color: bool = False):
        super().__init__(CONSOLE_FORMAT, datefmt="%H:%M:%S")
        self.use_color = use_color

    def format(self, record):
        line = super().format(record)
        code = self.COLORS.get(record.levelno)
        if self.use_color and code:
            return f"\033[{code}m{line}\033[0m"
        return line


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    console_level: Optional[str] = None,
    stream: Optional[TextIO] = None,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    """
    Install handlers on the ``roster`` logger, replacing earlier ones.

    Args:
        level: Level for the log file (and the console unless overridden)
        log_file: Rotating log file path; None logs to the console only
        console_level: Console level, defaults to ``level``
        stream: Console stream, stderr by default
        max_bytes: File size that triggers rotation
        backup_count: Rotated files to keep

    Returns:
        The ``roster`` logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(TRACE)

    stream = stream or sys.stderr
    console = logging.StreamHandler(stream)
    console.setLevel(level_number(console_level or level))
    console.setFormatter(ConsoleFormatter(use_color=getattr(stream, "isatty", lambda: False)()))
    logger.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        file_handler.setLevel(level_number(level))
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    logger.debug(
        f"Logging ready: console={logging.getLevelName(console.level)}, file={log_file or 'off'}"
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _short(value: Any) -> str:
    """Compact rendering for trace lines; collections show type and size only."""
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return f"{type(value).__name__}[{len(value)}]"
    text = repr(value)
    return text if len(text) <= 60 else text[:57] + "..."


def log_function_call(func: Callable) -> Callable:
    """
    Trace a function at TRACE level: arguments on entry, result and elapsed
    time on return. Exceptions are logged at ERROR and re-raised.
    """
    logger = logging.getLogger(func.__module__)
    name = func.__qualname__

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        tracing = logger.isEnabledFor(TRACE)
        if tracing:
            parts = [_short(a) for a in args] + [f"{k}={_short(v)}" for k, v in kwargs.items()]
            logger.log(TRACE, f"→ {name}({', '.join(parts)})")
        started = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(f"✖ {name} raised {type(e).__name__}: {e}")
            raise
        if tracing:
            logger.log(TRACE, f"← {name} = {_short(result)} in {time.perf_counter() - started:.3f}s")
        return result

    return wrapper


def log_check(
    logger: logging.Logger,
    subject: str,
    passed: bool,
    details: str = "",
    failure_level: int = logging.WARNING,
):
    """
    Log the outcome of a check such as "candidate holds the skill" or
    "shift was staffed". Passing checks go to DEBUG; failures to ``failure_level``.
    """
    msg = f"[{'✓' if passed else '✗'}] {subject}"
    if details:
        msg += f": {details}"
    logger.log(logging.DEBUG if passed else failure_level, msg)


class StepLogger:
    """Phase, step and detail lines for bulk generation, auto-matching and the optimizer."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def phase(self, title: str):
        self.logger.info(f"── {title} ──")

    def step(self, message: str):
        self.logger.info(f"  ▸ {message}")

    def detail(self, key: str, value: Any):
        self.logger.debug(f"      {key}: {value}")

    def check(self, subject: str, passed: bool, details: str = ""):
        log_check(self.logger, subject, passed, details)
