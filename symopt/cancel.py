# ---------- Cancellation ----------

import time
from typing import Optional


class CancelToken:
    """
    Cooperative cancellation for a solver run, checked once per iteration.\\
    The token is cancelled by `cancel()`, or once `timeout` seconds have elapsed since it was created.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        self._started = time.monotonic()
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        if self._cancelled:
            return True
        return self.timeout is not None and time.monotonic() - self._started >= self.timeout
