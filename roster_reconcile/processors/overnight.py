# Overnight consolidation - stitches evening / late-night / next-morning
# cells of one person into a single logical shift.

import re
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union

from ..config import ShiftSettings, get_settings


LEADING_HOUR_RE = re.compile(r"^(\d+)時")
DATE_FORMATS = ("%Y/%m/%d", "%Y-%m-%d")


def parse_roster_date(value: Union[str, date, datetime]) -> date:
    """'2025/10/05' (or '2025-10-05', or a date) → date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognized roster date {value!r}; expected YYYY/MM/DD")


def format_roster_date(d: date) -> str:
    return d.strftime("%Y/%m/%d")


@dataclass(frozen=True)
class RawShiftEntry:
    date: date
    facility: str
    time_slot: str
    person_label: str = ""

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "RawShiftEntry":
        return cls(
            date=parse_roster_date(record["date"]),
            facility=str(record.get("facility", "")).strip(),
            time_slot=str(record.get("timeSlot", "")).strip(),
            person_label=str(record.get("personLabel", "")),
        )


@dataclass(frozen=True)
class LogicalShift(RawShiftEntry):
    merged: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": format_roster_date(self.date),
            "facility": self.facility,
            "timeSlot": self.time_slot,
            "merged": self.merged,
        }


def next_date(d: date) -> date:
    return d + timedelta(days=1)


def leading_hour(time_slot: str) -> Optional[int]:
    m = LEADING_HOUR_RE.match(time_slot or "")
    return int(m.group(1)) if m else None


def slot_rank(time_slot: str, settings: Optional[ShiftSettings] = None) -> int:
    s = settings or get_settings().shifts
    hour = leading_hour(time_slot)
    if hour is None:
        return s.other_rank
    return s.slot_ranks.get(hour, s.other_rank)


def _to_logical(entry: RawShiftEntry, **changes) -> LogicalShift:
    merged = getattr(entry, "merged", False)
    base = LogicalShift(
        date=entry.date,
        facility=entry.facility,
        time_slot=entry.time_slot,
        person_label=entry.person_label,
        merged=merged,
    )
    return replace(base, **changes) if changes else base


def consolidate(
    entries: Iterable[RawShiftEntry],
    settings: Optional[ShiftSettings] = None,
) -> List[LogicalShift]:
    """
    Merge one person's overnight cells into logical shifts.

    Pairing is strictly forward in (date, rank) order and takes the first
    unconsumed candidate. Entries are never removed from the sorted list;
    a consumed-index set tracks what has been absorbed. Merged labels do not
    match any trigger label, so running this on its own output changes nothing.
    """
    s = settings or get_settings().shifts

    def sort_key(e):
        return (e.date, slot_rank(e.time_slot, s))

    shifts = sorted(entries, key=sort_key)
    late_slots = (s.late_night, s.late_evening_alt)
    consumed: Set[int] = set()
    out: List[LogicalShift] = []

    def find_forward(start: int, pred) -> int:
        for j in range(start + 1, len(shifts)):
            if j not in consumed and pred(shifts[j]):
                return j
        return -1

    for i, cur in enumerate(shifts):
        if i in consumed:
            continue

        if cur.time_slot == s.evening_start:
            night = find_forward(i, lambda x: x.date == cur.date
                                 and x.facility == cur.facility
                                 and x.time_slot in late_slots)
            if night >= 0:
                following = next_date(cur.date)
                morning = find_forward(i, lambda x: x.date == following
                                       and x.facility == cur.facility
                                       and x.time_slot == s.early_morning)
                consumed.add(i)
                consumed.add(night)
                if morning >= 0:
                    consumed.add(morning)
                    out.append(_to_logical(cur, time_slot=s.full_overnight_label, merged=True))
                else:
                    out.append(_to_logical(cur, time_slot=s.open_overnight_label, merged=True))
                continue

        if cur.time_slot in late_slots:
            following = next_date(cur.date)
            morning = find_forward(i, lambda x: x.date == following
                                   and x.facility == cur.facility
                                   and x.time_slot == s.early_morning)
            if morning >= 0:
                consumed.add(i)
                consumed.add(morning)
                hour = leading_hour(cur.time_slot)
                label = s.late_start_label.format(hour=hour) if hour is not None else f"{cur.time_slot}翌9時"
                out.append(_to_logical(cur, time_slot=label, merged=True))
                continue

        out.append(_to_logical(cur))

    out.sort(key=sort_key)
    return out


def consolidate_by_employee(
    shifts_by_employee: Mapping[str, Iterable[RawShiftEntry]],
    settings: Optional[ShiftSettings] = None,
) -> Dict[str, List[LogicalShift]]:
    return {emp_no: consolidate(shifts, settings) for emp_no, shifts in shifts_by_employee.items()}
