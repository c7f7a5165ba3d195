"""
Roster Processor - runs a period's raw roster records through cleaning,
name matching and overnight consolidation.
Returns plain dictionaries for the storage / dashboard / notification side.
"""
import logging
from collections import defaultdict
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from ..config import AppSettings, get_settings
from ..directory import EmployeeDirectory
from .name_matcher import NameMatcher
from .overnight import RawShiftEntry, consolidate
from .reconcile import reconcile_records
from .roster_cleaning import clean_name, normalize_time_slot

logger = logging.getLogger(__name__)


class RosterProcessor:
    """Match roster cells to employees and build per-employee shift lists."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self.settings = settings or get_settings()

    def clean_records(self, records: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        """Drop placeholder cells and strip hour notes from the rest."""
        s = self.settings
        cleaned = []
        for rec in records:
            name = clean_name(rec.get("personLabel"), s.cleaning)
            if not name:
                continue
            out = dict(rec)
            out["rawLabel"] = rec.get("personLabel")
            out["personLabel"] = name
            out["timeSlot"] = normalize_time_slot(rec.get("timeSlot"), s)
            cleaned.append(out)
        return cleaned

    def process(
        self,
        records: Sequence[Mapping[str, Any]],
        directory: EmployeeDirectory,
        matcher: Optional[NameMatcher] = None,
    ) -> Dict[str, Any]:
        """
        Process one period of roster records.

        Args:
            records: dicts with date ("YYYY/MM/DD"), facility, timeSlot, personLabel
            directory: employee master for the run
            matcher: prebuilt matcher to reuse across periods (built from
                directory when omitted)

        Returns:
            Dictionary with match annotations, the unmatched review list,
            consolidated shifts per employee and a summary DataFrame
        """
        s = self.settings
        matcher = matcher or NameMatcher(directory, s.matching)

        cleaned = self.clean_records(records)
        skipped = len(records) - len(cleaned)
        if skipped:
            logger.debug("Skipped %d empty or placeholder cell(s)", skipped)

        result = reconcile_records(cleaned, matcher, s.matching)

        # Group matched records by employee
        grouped: Dict[str, List[RawShiftEntry]] = defaultdict(list)
        for rec in result.records:
            emp_no = rec.get("employeeNo")
            if not emp_no:
                continue
            grouped[emp_no].append(RawShiftEntry.from_record(rec))

        shifts_by_employee = {}
        summary_rows = []
        for emp_no in sorted(grouped):
            shifts = consolidate(grouped[emp_no], s.shifts)
            shifts_by_employee[emp_no] = [sh.to_dict() for sh in shifts]
            emp = directory.get(emp_no)
            summary_rows.append({
                "Employee No": emp_no,
                "Name": emp.canonical_name if emp else "",
                "Shifts": len(shifts),
                "Merged": sum(1 for sh in shifts if sh.merged),
                "Facilities": len({sh.facility for sh in shifts}),
                "Days": len({sh.date for sh in shifts}),
            })

        summary = pd.DataFrame(
            summary_rows,
            columns=["Employee No", "Name", "Shifts", "Merged", "Facilities", "Days"],
        )

        counts = dict(result.counts)
        counts["skipped_cells"] = skipped
        counts["employees"] = len(shifts_by_employee)

        return {
            "match_results": result.records,
            "unmatched": result.unmatched,
            "counts": counts,
            "shifts_by_employee": shifts_by_employee,
            "name_matching": result.name_matching,
            "summary": summary,
        }
