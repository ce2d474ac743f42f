import signal
import sys
from PySide6.QtWidgets import QApplication

from playtracker.shared.paths import ensure_app_dirs
from playtracker.shared.store import ConfigStore
from playtracker.core.logging_ import setup_logging
from playtracker.core.tracker import PlaytimeTracker
from .ui.window import MainWindow


def main() -> None:
    ensure_app_dirs()
    cfg = ConfigStore().load()
    setup_logging(cfg.log_level)

    tracker = PlaytimeTracker(cfg)
    tracker.load()

    app = QApplication(sys.argv)
    app.aboutToQuit.connect(tracker.shutdown)

    win = MainWindow(tracker)
    win.show()
    tracker.start()

    # Handle Ctrl+C gracefully (works on Unix/Linux/Mac)
    # On Windows, Qt handles Ctrl+C automatically and triggers closeEvent
    def signal_handler(sig, frame):
        print("\nReceived interrupt signal (Ctrl+C), shutting down...")
        win.close()

    if hasattr(signal, 'SIGINT'):
        signal.signal(signal.SIGINT, signal_handler)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
