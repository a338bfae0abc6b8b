import logging
import os
from typing import Union

from customresource.constants import (
    DEFAULT_CALLBACK_TIMEOUT,
    FALSE_STRINGS,
    LOG_LEVELS,
    TRACE_LOG_LEVELS,
    TRUE_STRINGS,
)


def _env(name: str) -> str:
    return os.environ.get(name, "").strip()


def eval_log_type(env_var_name: str) -> Union[str, bool]:
    """Returns the lower-cased log level in the given variable, or False if it is unset or not a known level."""
    level = _env(env_var_name).lower()
    return level if level in LOG_LEVELS else False


def is_env_true(env_var_name: str) -> bool:
    return _env(env_var_name).lower() in TRUE_STRINGS


def is_env_not_false(env_var_name: str) -> bool:
    """Unset counts as true, which makes the variable an opt-out."""
    return _env(env_var_name).lower() not in FALSE_STRINGS


def parse_float_env(env_var_name: str, default: float) -> float:
    """Returns the positive number in the given variable, or ``default`` if it is unset, invalid or not positive."""
    value = _env(env_var_name)
    if not value:
        return default
    try:
        number = float(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            "Ignoring invalid value %r for %s, using %s", value, env_var_name, default
        )
        return default
    return number if number > 0 else default


# whether debug mode is enabled
DEBUG = is_env_true("DEBUG")

# log level override, one of LOG_LEVELS
CR_LOG = eval_log_type("CR_LOG")

# encoding of the status report body and of the progress output
DEFAULT_ENCODING = "utf-8"

# timeout (in seconds) for delivering the status report, bounded by the remaining invocation time
CALLBACK_TIMEOUT = parse_float_env("CALLBACK_TIMEOUT", DEFAULT_CALLBACK_TIMEOUT)

# whether to verify the TLS certificate of the callback endpoint
CALLBACK_TLS_VERIFY = is_env_not_false("CALLBACK_TLS_VERIFY")


def is_trace_logging_enabled() -> bool:
    return bool(CR_LOG) and CR_LOG in TRACE_LOG_LEVELS


# the command line replaces this with setup_logging
if DEBUG:
    logging.getLogger("customresource").setLevel(logging.DEBUG)
