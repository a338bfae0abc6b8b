import logging
import sys

from customresource import config

from .format import DefaultFormatter

# third-party loggers that are too chatty at the level of the customresource loggers
QUIET_LOGGERS = {
    "requests": logging.WARNING,
    "urllib3": logging.WARNING,
    "werkzeug": logging.WARNING,
}


def get_log_level_from_config() -> int:
    """The log level set with CR_LOG (``trace`` maps to DEBUG), or DEBUG/INFO depending on DEBUG."""
    if config.CR_LOG:
        if config.is_trace_logging_enabled():
            return logging.DEBUG
        return logging.getLevelName(str(config.CR_LOG).upper())
    return logging.DEBUG if config.DEBUG else logging.INFO


def setup_logging(log_level: int = logging.INFO) -> None:
    """
    Sends all log records of the given level to stderr, formatted with the ``DefaultFormatter``. Only the command line
    calls this, the library leaves the logging configuration to the application or the Lambda runtime.
    """
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(DefaultFormatter())
    logging.basicConfig(level=log_level, handlers=[handler], force=True)
    logging.captureWarnings(True)

    logging.getLogger("customresource").setLevel(log_level)
    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def setup_logging_from_config() -> None:
    setup_logging(get_log_level_from_config())
    if config.is_trace_logging_enabled():
        # trace also shows the connection handling of the status callbacks
        logging.getLogger("urllib3").setLevel(logging.DEBUG)
