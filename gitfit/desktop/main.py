import argparse
import signal
import sys

from PySide6.QtWidgets import QApplication

from gitfit.shared.paths import ensure_app_dirs
from gitfit.core.logging_ import setup_logging
from .ui.tray import TrayController


def main() -> None:
    parser = argparse.ArgumentParser(prog="gitfit", description="Developer fitness for the vibe coding era")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every companion CPU sample")
    args = parser.parse_args()

    ensure_app_dirs()
    setup_logging(verbose=args.verbose)

    app = QApplication(sys.argv)
    app.setQuitOnLastWindowClosed(False)
    tray = TrayController(app)
    tray.start()
    app.aboutToQuit.connect(tray.shutdown)

    def signal_handler(sig, frame):
        print("\nReceived interrupt signal (Ctrl+C), shutting down...")
        app.quit()

    if hasattr(signal, 'SIGINT'):
        signal.signal(signal.SIGINT, signal_handler)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
