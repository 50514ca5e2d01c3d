"""
Logger wrapping for promptloom components.

Every component accepts an optional logger. The supplied object is checked
once, when the component is constructed, and wrapped so that each message
carries the library and component name.
"""

import logging
from typing import Any, Optional

from .constants import LIBRARY_NAME


REQUIRED_LOGGER_METHODS = ("debug", "info", "warning", "error")


class LoggerContractError(TypeError):
    """Raised when a supplied logger lacks one of the leveled methods."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Logger is missing required methods: {', '.join(missing)}")


class PrefixedLogger:
    """Forwards leveled calls to a wrapped logger with a name prefix.

    Example:
        log = wrap_logger(logging.getLogger("app"), "Parser")
        log.debug("Parsed %s", path)
        # [promptloom] [Parser]: Parsed notes.md
    """

    def __init__(self, target: Any, name: Optional[str] = None) -> None:
        self._target = target
        self._name = name

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def target(self) -> Any:
        return self._target

    def _prefix(self, message: str) -> str:
        if self._name:
            return f"[{LIBRARY_NAME}] [{self._name}]: {message}"
        return f"[{LIBRARY_NAME}]: {message}"

    def _log(self, level: str, message: str, *args: Any) -> None:
        try:
            getattr(self._target, level)(self._prefix(str(message)), *args)
        except Exception:
            # Logger failures never propagate to the caller.
            pass

    def debug(self, message: str, *args: Any) -> None:
        self._log("debug", message, *args)

    def info(self, message: str, *args: Any) -> None:
        self._log("info", message, *args)

    def warning(self, message: str, *args: Any) -> None:
        self._log("warning", message, *args)

    def error(self, message: str, *args: Any) -> None:
        self._log("error", message, *args)


def wrap_logger(logger: Any = None, name: Optional[str] = None) -> PrefixedLogger:
    """Validate and wrap a logger.

    Args:
        logger: Any object with callable ``debug``, ``info``, ``warning`` and
            ``error`` methods. ``None`` selects the ``promptloom`` standard
            library logger. An existing PrefixedLogger is re-wrapped around
            its target.
        name: Component name placed in the message prefix.

    Returns:
        A PrefixedLogger.

    Raises:
        LoggerContractError: If a required method is missing.
    """
    if logger is None:
        logger = logging.getLogger(LIBRARY_NAME)
    if isinstance(logger, PrefixedLogger):
        logger = logger.target

    missing = [
        method for method in REQUIRED_LOGGER_METHODS
        if not callable(getattr(logger, method, None))
    ]
    if missing:
        raise LoggerContractError(missing)

    return PrefixedLogger(logger, name)
