"""Structured logging for Validatar.

Library modules log through the standard ``logging`` module
(``logging.getLogger(__name__)``); this module routes those records through
structlog so that they come out as JSON in production and as colored console
lines during development.

Example usage:
    from validatar.core.logging import bind_context, configure_logging

    configure_logging(level="DEBUG")

    with bind_context(suite_file="suites/orders.yaml"):
        logger.info("Parsing suite")  # Includes suite_file
"""

import logging
import socket
import sys
from contextvars import ContextVar
from functools import lru_cache
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from validatar import __version__

# Context variable for fields bound with bind_context
_bound_context: ContextVar[dict[str, Any]] = ContextVar("bound_context", default={})

# Module-level log level overrides
_module_log_levels: dict[str, int] = {}


class bind_context:
    """Context manager to bind additional fields to logs.

    Example:
        with bind_context(suite_file="orders.yaml"):
            logger.info("parsing")  # Includes suite_file
    """

    def __init__(self, **kwargs: Any) -> None:
        self.ctx = kwargs
        self._token: Any = None

    def __enter__(self) -> "bind_context":
        """Enter the context and bind the fields."""
        new_context = {**_bound_context.get(), **self.ctx}
        self._token = _bound_context.set(new_context)
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit the context and restore previous bindings."""
        _bound_context.reset(self._token)


def get_bound_context() -> dict[str, Any]:
    """Return a copy of the fields currently bound with bind_context."""
    return dict(_bound_context.get())


# =============================================================================
# Structlog Processors
# =============================================================================


def add_bound_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add bound context variables to log events."""
    for key, value in _bound_context.get().items():
        event_dict.setdefault(key, value)
    return event_dict


@lru_cache(maxsize=1)
def _get_hostname() -> str:
    """Get the hostname (cached)."""
    try:
        return socket.gethostname()
    except OSError:
        return "unknown"


def add_common_fields(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add common fields like version and hostname."""
    event_dict.setdefault("validatar_version", __version__)
    event_dict.setdefault("hostname", _get_hostname())
    return event_dict


# =============================================================================
# Logging Configuration
# =============================================================================


def set_module_log_level(module: str, level: int | str) -> None:
    """Set the log level for a specific module.

    The level applies to the module's stdlib logger, so children such as
    "validatar.parse.registry" inherit it from "validatar.parse" unless they
    have their own override.

    Args:
        module: Module name (e.g., "validatar.parse.registry")
        level: Log level name (DEBUG, INFO, ...) or int
    """
    if isinstance(level, str):
        numeric_level: int = getattr(logging, level.upper(), logging.INFO)
    else:
        numeric_level = level
    _module_log_levels[module] = numeric_level
    logging.getLogger(module).setLevel(numeric_level)


def get_module_log_level(module: str) -> int | None:
    """Get the log level override for a module, if any."""
    return _module_log_levels.get(module)


def clear_module_log_levels() -> None:
    """Clear all module-specific log level overrides."""
    for module in _module_log_levels:
        logging.getLogger(module).setLevel(logging.NOTSET)
    _module_log_levels.clear()


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_bound_context,
        add_common_fields,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.format_exc_info,
    ]


def configure_logging(
    level: str | int = logging.INFO,
    json_output: bool | None = None,
    log_file: str | None = None,
    module_levels: dict[str, str | int] | None = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Global log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Use JSON output format. If None, auto-detects:
                     True if not a TTY (production), False otherwise (dev)
        log_file: Optional file path for log output
        module_levels: Dict of module name to log level for per-module config
    """
    if json_output is None:
        json_output = not sys.stdout.isatty()

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if module_levels:
        for module, mod_level in module_levels.items():
            set_module_log_level(module, mod_level)
    # Handlers must not hide records a module override lets through
    handler_level = min([level, *_module_log_levels.values()])

    shared_processors = _shared_processors()

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if json_output:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Logs go to stderr so that command output on stdout stays parseable
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(handler_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(handler_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def reset_logging() -> None:
    """Reset logging configuration to defaults.

    Used by tests to get clean state between cases.
    """
    clear_module_log_levels()
    _bound_context.set({})

    structlog.reset_defaults()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
