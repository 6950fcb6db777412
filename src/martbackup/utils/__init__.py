"""Utility functions for martbackup."""

from martbackup.utils.timestamp import backup_filename, now_iso, parse_timestamp
from martbackup.utils.log import setup_logging

__all__ = ["backup_filename", "now_iso", "parse_timestamp", "setup_logging"]
