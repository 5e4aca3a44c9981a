import threading

from sexpreader import logconfig

_INIT_LOCK = threading.Lock()
_is_initialized = False


def init(force_reload: bool = False) -> None:
    """
    Initialize the reader package for use by a host program.

    Only the logging configuration needs setting up; the reader itself holds no
    global state. ``init()`` may be called more than once. Only the first
    invocation will configure logging unless ``force_reload=True``.
    """
    global _is_initialized

    with _INIT_LOCK:
        if _is_initialized and not force_reload:
            return

        logconfig.configure_root_logger()
        _is_initialized = True
