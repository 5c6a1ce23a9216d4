"""
Runtime Module
==============

Per-rank logging setup.
"""

from .logging import RankFilter, reset_logging, switch_log_file

__all__ = ["RankFilter", "reset_logging", "switch_log_file"]
