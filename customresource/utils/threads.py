import logging
import threading
from concurrent.futures import Future
from typing import Callable

LOG = logging.getLogger(__name__)


def start_worker_thread(func: Callable, *args, name: str = None, **kwargs) -> Future:
    """
    Runs ``func(*args, **kwargs)`` in a daemon thread and returns a Future of its result. The caller can stop waiting
    for the future at any time; a daemon thread never keeps the interpreter alive.

    :param func: the function to run
    :param name: the optional name of the thread
    :return: a future that holds the return value or the exception raised by ``func``
    """
    future = Future()

    def _run():
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(func(*args, **kwargs))
        except Exception as e:
            LOG.debug("Worker thread %s failed: %s", threading.current_thread().name, e)
            future.set_exception(e)

    threading.Thread(target=_run, name=name, daemon=True).start()
    return future
