import logging
from typing import Any, Dict, Optional


class AppLogger:
    """Stdlib logger wrapper carrying bound key/value context.

    Lines are rendered as ``message | key=value key=value`` so that the cart
    and order layers can attach user, product and vendor identifiers without
    building strings at every call site.
    """

    def __init__(
        self,
        name: str,
        context: Optional[Dict[str, Any]] = None,
        _logger: Optional[logging.Logger] = None,
    ):
        self._logger = _logger or logging.getLogger(name)
        self._name = name
        self._context = dict(context or {})

    @property
    def context(self) -> Dict[str, Any]:
        return dict(self._context)

    def bind(self, **extra: Any) -> "AppLogger":
        return AppLogger(self._name, {**self._context, **extra}, _logger=self._logger)

    def debug(self, message: str, **context: Any) -> None:
        self._emit(logging.DEBUG, message, context)

    def info(self, message: str, **context: Any) -> None:
        self._emit(logging.INFO, message, context)

    def warning(self, message: str, **context: Any) -> None:
        self._emit(logging.WARNING, message, context)

    def error(self, message: str, **context: Any) -> None:
        self._emit(logging.ERROR, message, context)

    def exception(self, message: str, **context: Any) -> None:
        """Log at error level with the active exception's traceback attached."""
        self._emit(logging.ERROR, message, context, exc_info=True)

    def _emit(
        self, level: int, message: str, context: Dict[str, Any], exc_info: bool = False
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        payload = {**self._context, **context}
        self._logger.log(level, self.render(message, payload), exc_info=exc_info)

    @staticmethod
    def render(message: str, context: Dict[str, Any]) -> str:
        if not context:
            return message
        pairs = " ".join(
            f"{key}={AppLogger._stringify(value)}" for key, value in context.items()
        )
        return f"{message} | {pairs}"

    @staticmethod
    def _stringify(value: Any) -> str:
        if value is None or isinstance(value, (bool, int, float)):
            return str(value)
        if isinstance(value, str):
            return repr(value) if (" " in value or not value) else value
        return repr(value)


def get_logger(name: str) -> AppLogger:
    return AppLogger(name)
