"""Roster processors module.

- NameMatcher: six-strategy cascade from roster label to canonical employee
- consolidate: overnight shift stitching for one person's entries
- reconcile_records: batch matching with facility second pass and review list
- RosterProcessor: cleaning + matching + consolidation for a whole period
"""
from .name_matcher import (
    MatchResult,
    MatchStrategy,
    NameIndex,
    NameMatcher,
    Normalizer,
    build_strategies,
)
from .overnight import (
    LogicalShift,
    RawShiftEntry,
    consolidate,
    consolidate_by_employee,
    next_date,
    slot_rank,
)
from .reconcile import ReconcileResult, reconcile_records, suggest_candidates
from .roster_cleaning import clean_name, normalize_time_slot
from .roster_processor import RosterProcessor

__all__ = [
    "MatchResult",
    "MatchStrategy",
    "NameIndex",
    "NameMatcher",
    "Normalizer",
    "build_strategies",
    "LogicalShift",
    "RawShiftEntry",
    "consolidate",
    "consolidate_by_employee",
    "next_date",
    "slot_rank",
    "ReconcileResult",
    "reconcile_records",
    "suggest_candidates",
    "clean_name",
    "normalize_time_slot",
    "RosterProcessor",
]
