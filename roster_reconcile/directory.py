"""
Employee directory - the in-memory master list the matcher is built from.
Rows come from whatever source the caller reads (sheet API, TSV, Excel);
loaders here only shape them into EmployeeRecord values.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import pandas as pd

from .config import DirectorySettings, get_settings

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("employeeNo", "canonicalName")


class EmployeeStatus(str, Enum):
    ACTIVE = "Active"
    RETIRED = "Retired"


@dataclass(frozen=True)
class EmployeeRecord:
    employee_no: str
    canonical_name: str
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    aliases: Tuple[str, ...] = ()
    facility: str = ""                 # home facility, used for surname disambiguation
    area: str = ""

    @property
    def is_active(self) -> bool:
        return self.status is EmployeeStatus.ACTIVE

    @property
    def surname(self) -> str:
        toks = self.canonical_name.split()
        return toks[0] if toks else ""


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_status(value: Any, settings: Optional[DirectorySettings] = None) -> EmployeeStatus:
    """Blank or unknown → Active; only explicit retired labels retire someone."""
    s = settings or get_settings().directory
    text = _cell(value)
    if text in s.retired_labels:
        return EmployeeStatus.RETIRED
    if text and text not in s.active_labels:
        logger.debug("Unknown status %r treated as active", text)
    return EmployeeStatus.ACTIVE


def parse_aliases(value: Any) -> Tuple[str, ...]:
    if isinstance(value, (list, tuple, set)):
        parts = [_cell(v) for v in value]
    else:
        parts = [a.strip() for a in _cell(value).split(",")]
    return tuple(a for a in parts if a)


class EmployeeDirectory:
    """Immutable employee table keyed by employee number."""

    def __init__(self, employees: Iterable[EmployeeRecord]):
        self._employees: List[EmployeeRecord] = []
        self._by_no: Dict[str, EmployeeRecord] = {}
        for emp in employees:
            if emp.employee_no in self._by_no:
                raise ValueError(f"Duplicate employee number {emp.employee_no!r}")
            self._by_no[emp.employee_no] = emp
            self._employees.append(emp)

    def __iter__(self) -> Iterator[EmployeeRecord]:
        return iter(self._employees)

    def __len__(self) -> int:
        return len(self._employees)

    def get(self, employee_no: str) -> Optional[EmployeeRecord]:
        return self._by_no.get(employee_no)

    @property
    def active(self) -> List[EmployeeRecord]:
        return [e for e in self._employees if e.is_active]

    # ------------------------------------------------------------------
    # Loaders
    # ------------------------------------------------------------------

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Dict[str, Any]],
        settings: Optional[DirectorySettings] = None,
    ) -> "EmployeeDirectory":
        """
        Build from row dicts shaped like
        {employeeNo, canonicalName, status, aliases, facility?, area?}.

        Rows with a blank number or name are skipped.
        """
        s = settings or get_settings().directory
        employees = []
        for i, row in enumerate(rows):
            no = _cell(row.get("employeeNo"))
            name = _cell(row.get("canonicalName"))
            if not no or not name:
                logger.debug("Skipping directory row %d: missing number or name", i)
                continue
            employees.append(EmployeeRecord(
                employee_no=no.zfill(s.employee_no_width),
                canonical_name=name,
                status=parse_status(row.get("status"), s),
                aliases=parse_aliases(row.get("aliases")),
                facility=_cell(row.get("facility")),
                area=_cell(row.get("area")),
            ))
        logger.debug("Loaded %d employees", len(employees))
        return cls(employees)

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        settings: Optional[DirectorySettings] = None,
    ) -> "EmployeeDirectory":
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(
                f"Employee master is missing required column(s): {', '.join(missing)}"
            )
        df = df.astype(object).where(pd.notna(df), None)
        return cls.from_rows(df.to_dict(orient="records"), settings)

    @classmethod
    def from_excel_bytes(
        cls,
        file_bytes: bytes,
        sheet_name: Optional[str] = None,
        settings: Optional[DirectorySettings] = None,
    ) -> "EmployeeDirectory":
        """Read the master list from the first (or named) sheet of a workbook."""
        x = pd.ExcelFile(BytesIO(file_bytes), engine="openpyxl")
        sheet = sheet_name or x.sheet_names[0]
        if sheet not in x.sheet_names:
            raise ValueError(f"Sheet '{sheet}' not found; available: {', '.join(x.sheet_names)}")
        df = x.parse(sheet, dtype=str)
        df.columns = [str(c).strip() for c in df.columns]
        return cls.from_frame(df, settings)
