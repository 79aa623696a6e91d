import threading


class FaultInjector:
    """
    Counts handled requests and flags every Nth one as a simulated upstream failure.
    One instance lives on app.state and is shared by all requests of the process.
    """

    def __init__(self, every: int = 5):
        self.every = every
        self._count = 0
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        return self._count

    def next_request(self) -> int:
        """Registers a request and returns its 1-based number."""
        with self._lock:
            self._count += 1
            return self._count

    def should_fail(self, request_number: int) -> bool:
        return self.every > 0 and request_number % self.every == 0
