import logging
import sys

from ..config import LOG_LEVEL

ROOT = "webproof"

def get_logger(component: str = ""):
    """Return the package logger, or a child like ``webproof.verifier``.

    Handlers live on the root ``webproof`` logger only; children propagate.
    """
    root = logging.getLogger(ROOT)
    if not root.handlers:
        h = logging.StreamHandler(sys.stderr)
        fmt = logging.Formatter("[%(asctime)s] %(levelname)s %(name)s %(message)s")
        h.setFormatter(fmt)
        root.addHandler(h)
        root.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))
    return logging.getLogger(f"{ROOT}.{component}") if component else root
