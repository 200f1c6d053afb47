from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from gitfit.shared.paths import log_path, ensure_app_dirs


def setup_logging(verbose: bool = False) -> None:
    ensure_app_dirs()
    root = logging.getLogger()
    root.setLevel(logging.INFO)

    if root.handlers:
        return

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")

    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    fh = RotatingFileHandler(str(log_path()), maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    fh.setLevel(logging.INFO)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Per-sample CPU lines are DEBUG; surface them only when asked.
    if verbose:
        root.setLevel(logging.DEBUG)
        logging.getLogger("gitfit.core.monitor.vibe_monitor").setLevel(logging.DEBUG)
        logging.getLogger("gitfit.core.monitor.cpu_tracker").setLevel(logging.DEBUG)
