# Roster cell cleanup - hand-typed cells carry hour notes ("沼田-8",
# "青木19-", "マイ16半") and placeholders ("空き") around the actual name.

import re
from typing import Any, Optional

from ..config import AppSettings, CleaningSettings, get_settings


_SEP = r"[⁻\-ー]"
HOUR_NOTE_PATTERNS = [
    re.compile(_SEP + r"\d+半?$"),      # trailing  -8 / -8半
    re.compile(r"^\d+半?" + _SEP),      # leading   19- / 20半-
    re.compile(r"\d+半?" + _SEP + r"$"),  # trailing  19- / 20半-
    re.compile(r"\d+半?" + _SEP),       # inner     19-
    re.compile(r"\d+半$"),              # trailing  16半
]


def clean_name(cell: Any, settings: Optional[CleaningSettings] = None) -> str:
    """Return the bare name in a roster cell, or '' for an empty/placeholder slot."""
    s = settings or get_settings().cleaning
    if cell is None:
        return ""
    n = str(cell).strip()
    if not n:
        return ""
    if any(word in n for word in s.placeholder_words):
        return ""
    for pat in HOUR_NOTE_PATTERNS:
        n = pat.sub("", n, count=1)
    n = n.replace("★", "").strip()
    return n


def normalize_time_slot(label: Any, settings: Optional[AppSettings] = None) -> str:
    """Expand the abbreviated evening label; anything else is only trimmed."""
    s = settings or get_settings()
    if not label:
        return ""
    t = str(label).strip()
    if t == s.cleaning.short_evening_label:
        return s.shifts.evening_start
    return t
