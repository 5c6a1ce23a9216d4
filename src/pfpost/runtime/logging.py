"""
Per-rank logging setup.

Every rank logs to the console with a ``[rank N/size]`` prefix. Ranks other
than 0 can be quieted below a level, since the reduced results they report
are the same as rank 0's.
"""

import os
import sys
import logging
from typing import Optional

from ..parallel.communicator import Communicator

CONSOLE_FORMAT = '[rank %(rank)d/%(size)d] %(name)s: %(message)s'
FILE_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


class RankFilter(logging.Filter):
    """Stamps records with the rank, and drops non-root records below ``quiet_level``."""

    def __init__(self, rank: int = 0, size: int = 1, quiet_level: int = logging.NOTSET):
        super().__init__()
        self.rank = rank
        self.size = size
        self.quiet_level = quiet_level

    def filter(self, record: logging.LogRecord) -> bool:
        record.rank = self.rank
        record.size = self.size
        return self.rank == 0 or record.levelno >= self.quiet_level


def _rank_and_size(communicator: Optional[Communicator]):
    if communicator is None:
        return 0, 1
    return communicator.rank, communicator.size


def reset_logging(communicator: Optional[Communicator] = None,
                  level: int = logging.INFO,
                  quiet_level: int = logging.NOTSET) -> None:
    """
    Replace the root logger's handlers with one rank-prefixed console handler.

    Args:
        communicator: group of this rank (default: a single rank 0)
        level: root logger level
        quiet_level: ranks other than 0 only print records at or above this
    """
    rank, size = _rank_and_size(communicator)
    root_logger = logging.getLogger()

    # clear any existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.addFilter(RankFilter(rank, size, quiet_level))
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    root_logger.setLevel(level)


def switch_log_file(log_dir: str, communicator: Optional[Communicator] = None,
                    stem: str = 'pfpost') -> str:
    """
    Send this rank's records to ``<log_dir>/<stem>.<rank>.log``.

    An earlier file handler on the root logger is closed and replaced, so
    each rank writes one file at a time.

    Returns:
        path of the log file
    """
    rank, size = _rank_and_size(communicator)
    root_logger = logging.getLogger()

    for h in list(root_logger.handlers):
        if isinstance(h, logging.FileHandler):
            root_logger.removeHandler(h)
            h.close()

    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, f'{stem}.{rank}.log')

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.addFilter(RankFilter(rank, size))
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    root_logger.addHandler(file_handler)
    return log_file
