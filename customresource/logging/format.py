"""Formatting of the log output of the ``customresource`` command line."""
import logging
from functools import lru_cache

MAX_THREAD_NAME_LEN = 12
MAX_NAME_LEN = 26

LOG_FORMAT = (
    "%(asctime)s.%(msecs)03d %(cr_level)5s --- [%(cr_thread)"
    f"{MAX_THREAD_NAME_LEN}s] %(cr_name)-{MAX_NAME_LEN}s : %(message)s"
)
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

SHORT_LEVEL_NAMES = {
    logging.CRITICAL: "FATAL",
    logging.WARNING: "WARN",
}


@lru_cache(maxsize=256)
def compress_logger_name(name: str, length: int) -> str:
    """
    Shortens a dotted logger name to at most ``length`` characters by abbreviating its parts to their first letter,
    leftmost part first. For example ``my.very.long.logger.name`` with length 17 becomes ``m.v.l.logger.name``. The
    last part is cut if abbreviating the others is not enough, but always keeps one character.
    """
    if len(name) <= length:
        return name

    parts = name.split(".")
    for i in range(len(parts) - 1):
        parts[i] = parts[i][:1]
        shortened = ".".join(parts)
        if len(shortened) <= length:
            return shortened

    prefix = ".".join(parts[:-1])
    room = length - len(prefix) - 1 if prefix else length
    parts[-1] = parts[-1][: max(1, room)]
    return ".".join(parts)


class DefaultFormatter(logging.Formatter):
    """Formats records with ``LOG_FORMAT``, and fills in the ``cr_*`` attributes the format refers to."""

    def __init__(self, fmt: str = LOG_FORMAT, datefmt: str = LOG_DATE_FORMAT):
        super().__init__(fmt=fmt, datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:
        record.cr_level = SHORT_LEVEL_NAMES.get(record.levelno, record.levelname)
        record.cr_name = compress_logger_name(record.name, MAX_NAME_LEN)
        record.cr_thread = record.threadName[-MAX_THREAD_NAME_LEN:]
        return super().format(record)
