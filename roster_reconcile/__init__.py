"""Roster identity reconciliation and overnight shift consolidation."""
from .config import AppSettings, get_settings, reset_settings, update_settings
from .directory import EmployeeDirectory, EmployeeRecord, EmployeeStatus
from .logs import setup_logging
from .processors import (
    LogicalShift,
    MatchResult,
    MatchStrategy,
    NameMatcher,
    RawShiftEntry,
    RosterProcessor,
    consolidate,
)

__version__ = "1.0.0"

__all__ = [
    "AppSettings",
    "get_settings",
    "reset_settings",
    "update_settings",
    "EmployeeDirectory",
    "EmployeeRecord",
    "EmployeeStatus",
    "LogicalShift",
    "MatchResult",
    "MatchStrategy",
    "NameMatcher",
    "RawShiftEntry",
    "RosterProcessor",
    "consolidate",
    "setup_logging",
]
