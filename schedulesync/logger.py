import logging
import sys


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the command line application.

    Library modules only create loggers; handlers are attached here.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    logger = logging.getLogger("schedulesync")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(level)

    return logger
