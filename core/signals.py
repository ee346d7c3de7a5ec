from PySide6.QtCore import QObject, Signal


class BrowserSignals(QObject):
    """Signals a browser session emits towards the rendering layer."""

    catalog_loaded = Signal(int)
    view_changed = Signal()
    ready_changed = Signal(bool)
