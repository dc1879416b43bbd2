import logging
import sys

_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def _render(message: str, fields: dict[str, object]) -> str:
    """Append key=value pairs so structured fields survive the plain formatter."""
    if not fields:
        return message
    rendered = " ".join(f"{key}={value!r}" for key, value in sorted(fields.items()))
    return f"{message} | {rendered}"


class Log:
    """Centralized logging for the intake worker.

    Keyword arguments are treated as structured fields: they are attached to the
    record as ``extra`` and rendered after the message. Callers pass structural
    facts only (ids, counts, confidence), never file bytes or extracted text.
    """

    _logger: logging.Logger = logging.getLogger("score_intake")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(_FORMAT))
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **fields: object) -> None:
        cls._logger.info(_render(message, fields), extra={"fields": fields})

    @classmethod
    def error(cls, message: str, **fields: object) -> None:
        cls._logger.error(_render(message, fields), extra={"fields": fields})

    @classmethod
    def warning(cls, message: str, **fields: object) -> None:
        cls._logger.warning(_render(message, fields), extra={"fields": fields})

    @classmethod
    def debug(cls, message: str, **fields: object) -> None:
        cls._logger.debug(_render(message, fields), extra={"fields": fields})
