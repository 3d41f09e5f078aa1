"""Logger setup for the scripts that drive the mesh and export pipelines."""
import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"

# matplotlib logs font discovery at DEBUG; keep it out of --debug runs
QUIET_LOGGERS = ("matplotlib",)


def _level(level:Union[int, str])->int:
    if isinstance(level, str):
        value = logging.getLevelName(level.strip().upper())
        if not isinstance(value, int):
            raise ValueError(f"unknown logging level {level!r}")
        return value
    return int(level)

def setup_logging(level:Union[int, str]=logging.INFO, log_file:Optional[str]=None,
                  fmt:str=LOG_FORMAT)->logging.Logger:
    """Attach console (and optionally file) handlers to the ``cmbmesh`` logger.

    ``level`` is a ``logging`` constant or a name such as ``"debug"``.
    Calling it again replaces the handlers instead of adding more.
    """
    level = _level(level)
    logger = logging.getLogger("cmbmesh")
    logger.setLevel(level)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    formatter = logging.Formatter(fmt, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    for h in handlers:
        h.setLevel(level)
        h.setFormatter(formatter)
        logger.addHandler(h)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logger.debug("logging to %s", log_file or "stdout")
    return logger
