import logging
import sys

_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Send log records to stderr so stdout stays free for reports.

    ``quiet`` keeps only warnings and errors (per-member failures still show);
    ``verbose`` adds the per-member DEBUG lines and wins over ``quiet``.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(handler)
