import threading

from .errors import Canceled


class CancellationToken:
    """Cooperative cancellation flag passed explicitly into long-running operations.

    The token may be triggered from any thread or from a signal handler. Operations
    poll it at well-defined points and raise Canceled once they observe it.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self):
        if self._event.is_set():
            raise Canceled("operation canceled")
