import logging
import sys


def setup_logging(level="INFO") -> None:
    """
    Send application logs to stderr with timestamps.

    Call this ONCE from the process entry point, before the app starts
    serving. Existing root handlers are removed to avoid duplicate lines.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(fmt)
    root.addHandler(handler)

    # Werkzeug prints one line per request at INFO; keep it but not below.
    logging.getLogger("werkzeug").setLevel(max(level, logging.INFO))
    logging.captureWarnings(True)
