"""Debounced text input.

A burst of ``on_text_changed`` calls collapses into one callback with the last
text, fired once the input has been quiet for ``interval_ms``.  The callback
runs on the thread owning the debouncer (the UI thread); nothing sleeps.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, Optional

from PySide6.QtCore import QObject, Qt, QTimer

log = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 150


class Debouncer(QObject):
    def __init__(
        self,
        callback: Callable[[str], None],
        interval_ms: int = DEFAULT_DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._callback = callback
        self.interval_ms = max(0, int(interval_ms))
        self._clock = clock
        self._text = ""
        self._stamp: Optional[float] = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._fire)

    @property
    def pending(self) -> bool:
        return self._stamp is not None

    @property
    def text(self) -> str:
        return self._text

    def on_text_changed(self, text: str) -> None:
        self._text = text
        self._stamp = self._clock()
        # restarting an active single-shot timer supersedes the earlier shot
        self._timer.start(self.interval_ms)

    def cancel(self) -> None:
        self._timer.stop()
        self._stamp = None

    def flush(self) -> bool:
        """Run a pending callback now.  Returns whether one was pending."""
        if self._stamp is None:
            return False
        self._timer.stop()
        self._run()
        return True

    def _fire(self) -> None:
        stamp = self._stamp
        if stamp is None:
            return
        remaining = self.interval_ms / 1000.0 - (self._clock() - stamp)
        if remaining > 0:
            self._timer.start(max(1, math.ceil(remaining * 1000)))
            return
        self._run()

    def _run(self) -> None:
        self._stamp = None
        log.debug("Debounced text settled: %r", self._text)
        self._callback(self._text)


__all__ = ["Debouncer", "DEFAULT_DEBOUNCE_MS"]
