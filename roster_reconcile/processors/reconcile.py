# Batch reconciliation - runs the name matcher over a period's roster records,
# resolves leftover same-surname cells by facility, and reports the rest for
# manual review.

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple

import pandas as pd
from fuzzywuzzy import fuzz

from ..config import MatchingSettings, get_settings
from ..directory import EmployeeRecord
from .name_matcher import MatchResult, MatchStrategy, NameMatcher, first_token

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    records: List[Dict[str, Any]]           # input records + match annotation
    unmatched: List[Dict[str, Any]]         # one entry per distinct unmatched label
    counts: Dict[str, int]
    name_matching: pd.DataFrame


def suggest_candidates(
    label: str,
    matcher: NameMatcher,
    limit: int = 3,
    min_score: int = 60,
) -> List[Tuple[str, str, int]]:
    """Closest active employees by fuzz.ratio on compact normalized names."""
    if limit <= 0:
        return []
    needle = matcher.normalize.compact(label)
    if not needle:
        return []
    scored = []
    for emp in matcher.index.employees:
        sc = fuzz.ratio(needle, matcher.normalize.compact(emp.canonical_name))
        if sc >= min_score:
            scored.append((emp.employee_no, emp.canonical_name, sc))
    scored.sort(key=lambda t: (-t[2], t[0]))
    return scored[:limit]


def match_with_facility(
    label: str,
    facility: str,
    matcher: NameMatcher,
    facility_employees: Mapping[str, Set[str]],
    settings: Optional[MatchingSettings] = None,
) -> Optional[EmployeeRecord]:
    """
    Second-pass resolution for a surname shared by several active employees.

    Static hints for the facility win; otherwise the surname bucket is
    narrowed to employees already matched at this facility in the batch.
    """
    s = settings or matcher.settings
    surname = first_token(label)
    if not surname:
        return None

    hinted_no = s.facility_surname_hints.get(facility, {}).get(surname)
    if hinted_no:
        emp = matcher.directory.get(hinted_no)
        if emp is not None and emp.is_active:
            return emp
        logger.debug("Facility hint %s/%s → %s is not an active employee", facility, surname, hinted_no)

    bucket = matcher.index.surname_bucket(surname)
    if len(bucket) <= 1:
        return None
    seen_here = facility_employees.get(facility, set())
    candidates = [e for e in bucket if e.employee_no in seen_here]
    if len(candidates) == 1:
        return candidates[0]
    return None


def _annotate(record: Mapping[str, Any], result: MatchResult) -> Dict[str, Any]:
    out = dict(record)
    out.update(result.to_annotation())
    return out


def reconcile_records(
    records: Sequence[Mapping[str, Any]],
    matcher: NameMatcher,
    settings: Optional[MatchingSettings] = None,
) -> ReconcileResult:
    s = settings or matcher.settings

    # === pass 1: cascade per record ===
    results: List[MatchResult] = []
    for rec in records:
        results.append(matcher.match(str(rec.get("personLabel", "")), rec.get("facility") or None))

    # === pass 2: facility-based resolution of ambiguous surnames ===
    facility_employees: Dict[str, Set[str]] = defaultdict(set)
    for rec, res in zip(records, results):
        if res.matched:
            facility_employees[str(rec.get("facility", ""))].add(res.employee.employee_no)

    pass2 = 0
    for i, (rec, res) in enumerate(zip(records, results)):
        if res.matched:
            continue
        emp = match_with_facility(
            str(rec.get("personLabel", "")).strip(),
            str(rec.get("facility", "")),
            matcher,
            facility_employees,
            s,
        )
        if emp is not None:
            results[i] = MatchResult(emp, MatchStrategy.FACILITY)
            pass2 += 1

    annotated = [_annotate(rec, res) for rec, res in zip(records, results)]

    # Unmatched labels, grouped with the facilities they appeared at
    unmatched_map: Dict[str, Dict[str, Any]] = {}
    for rec, res in zip(records, results):
        if res.matched:
            continue
        label = str(rec.get("personLabel", "")).strip()
        entry = unmatched_map.get(label)
        if entry is None:
            entry = {
                "personLabel": label,
                "facilities": [],
                "occurrences": 0,
                "suggestions": [
                    {"employeeNo": no, "canonicalName": name, "score": sc}
                    for no, name, sc in suggest_candidates(
                        label, matcher, s.suggestion_limit, s.suggestion_min_score
                    )
                ],
            }
            unmatched_map[label] = entry
        entry["occurrences"] += 1
        fac = str(rec.get("facility", ""))
        if fac and fac not in entry["facilities"]:
            entry["facilities"].append(fac)
    unmatched = [unmatched_map[k] for k in sorted(unmatched_map)]

    matched = sum(1 for r in results if r.matched)
    counts = {
        "records": len(records),
        "matched": matched,
        "unmatched": len(records) - matched,
        "facility_pass": pass2,
        "unmatched_labels": len(unmatched),
    }
    for kind in MatchStrategy:
        counts[f"by_{kind.value}"] = sum(1 for r in results if r.strategy is kind)

    logger.info("Name matching: %d matched, %d unmatched", matched, counts["unmatched"])
    if pass2:
        logger.info("  facility-based resolution added %d match(es)", pass2)
    for entry in unmatched:
        logger.warning("Unmatched name %r at %s", entry["personLabel"], ", ".join(entry["facilities"]) or "-")

    name_matching = pd.DataFrame(
        [
            {
                "Roster Name": str(rec.get("personLabel", "")),
                "Facility": str(rec.get("facility", "")),
                "Employee No": res.employee.employee_no if res.matched else "",
                "Matched Name": res.employee.canonical_name if res.matched else "",
                "Strategy": res.strategy.value if res.strategy else "",
                "Flag": "" if res.matched else "REVIEW",
            }
            for rec, res in zip(records, results)
        ],
        columns=["Roster Name", "Facility", "Employee No", "Matched Name", "Strategy", "Flag"],
    )

    return ReconcileResult(
        records=annotated,
        unmatched=unmatched,
        counts=counts,
        name_matching=name_matching,
    )
