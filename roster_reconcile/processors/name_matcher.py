# Name matcher - resolves hand-typed roster names to canonical employees.
# Strategies run in a fixed order and the first hit wins; ambiguity is a
# no-match, never a guess.

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..config import MatchingSettings, get_settings
from ..directory import EmployeeDirectory, EmployeeRecord


# Half-width and full-width (U+3000) whitespace
WHITESPACE_RE = re.compile(r"[\s　]+")


class MatchStrategy(str, Enum):
    EXACT = "exact"
    NORMALIZED = "normalized"
    ALIAS = "alias"
    VARIANT = "variant"
    SURNAME = "surname"
    PREFIX = "prefix"
    FACILITY = "facility"       # batch second pass


@dataclass(frozen=True)
class MatchResult:
    employee: Optional[EmployeeRecord] = None
    strategy: Optional[MatchStrategy] = None

    @property
    def matched(self) -> bool:
        return self.employee is not None

    def to_annotation(self) -> Dict[str, Optional[str]]:
        if self.employee is None:
            return {"employeeNo": None, "canonicalName": None, "strategy": None}
        return {
            "employeeNo": self.employee.employee_no,
            "canonicalName": self.employee.canonical_name,
            "strategy": self.strategy.value if self.strategy else None,
        }


NO_MATCH = MatchResult()


def collapse_spaces(s: str) -> str:
    return WHITESPACE_RE.sub(" ", str(s)).strip()


def strip_spaces(s: str) -> str:
    return WHITESPACE_RE.sub("", str(s))


def first_token(s: str) -> str:
    toks = collapse_spaces(s).split(" ")
    return toks[0] if toks else ""


class Normalizer:
    """Comparison-key builder. Not reversible; never used for display."""

    def __init__(self, table: Dict[str, str]):
        self.table = dict(table)
        self._trans = str.maketrans(self.table)

    def __call__(self, name: str) -> str:
        return collapse_spaces(name).translate(self._trans)

    def compact(self, name: str) -> str:
        return strip_spaces(self(name))


class NameIndex:
    """
    Lookup tables over the active employees of a directory.

    Read-only after construction, so one index can serve any number of
    callers. On key collisions the first registered employee keeps the key.
    """

    def __init__(self, directory: EmployeeDirectory, normalizer: Normalizer):
        self.normalize = normalizer
        self.employees: List[EmployeeRecord] = directory.active
        self.by_name: Dict[str, EmployeeRecord] = {}
        self.by_normalized_name: Dict[str, EmployeeRecord] = {}
        self.by_compact_name: Dict[str, EmployeeRecord] = {}
        self.by_surname: Dict[str, List[EmployeeRecord]] = {}
        self.by_alias: Dict[str, EmployeeRecord] = {}
        self.by_normalized_alias: Dict[str, EmployeeRecord] = {}
        # whitespace-stripped raw canonical names, for prefix inference
        self.stripped_names: List[Tuple[str, EmployeeRecord]] = []

        for emp in self.employees:
            name = emp.canonical_name
            self.by_name.setdefault(name, emp)
            self.by_normalized_name.setdefault(normalizer(name), emp)
            self.by_compact_name.setdefault(normalizer.compact(name), emp)
            self.stripped_names.append((strip_spaces(name), emp))

            surname = emp.surname
            if surname:
                self.by_surname.setdefault(surname, []).append(emp)
                n_surname = normalizer(surname)
                if n_surname != surname:
                    self.by_surname.setdefault(n_surname, []).append(emp)

            for alias in emp.aliases:
                self.by_alias.setdefault(alias, emp)
                self.by_normalized_alias.setdefault(normalizer(alias), emp)

    def surname_bucket(self, surname: str) -> List[EmployeeRecord]:
        return self.by_surname.get(surname) or self.by_surname.get(self.normalize(surname)) or []


# ----------------------------------------------------------------------
# Strategies: (name, index, facility_hint) -> Optional[EmployeeRecord]
# ----------------------------------------------------------------------

StrategyFn = Callable[[str, NameIndex, Optional[str]], Optional[EmployeeRecord]]


def match_exact(name: str, index: NameIndex, facility_hint: Optional[str] = None) -> Optional[EmployeeRecord]:
    return index.by_name.get(name)


def match_normalized(name: str, index: NameIndex, facility_hint: Optional[str] = None) -> Optional[EmployeeRecord]:
    hit = index.by_normalized_name.get(index.normalize(name))
    if hit is not None:
        return hit
    compact = index.by_compact_name.get(index.normalize.compact(name))
    # An alias of the same employee outranks spacing-insensitive comparison
    if compact is not None and index.by_alias.get(name) is compact:
        return None
    return compact


def match_alias(name: str, index: NameIndex, facility_hint: Optional[str] = None) -> Optional[EmployeeRecord]:
    hit = index.by_alias.get(name)
    if hit is None:
        hit = index.by_normalized_alias.get(index.normalize(name))
    return hit


class VariantStrategy:
    """Swap one interchangeable character at a time and retry exact/normalized."""

    def __init__(self, variant_map: Dict[str, str]):
        self.variant_map = dict(variant_map)

    def candidates(self, name: str) -> List[str]:
        out = []
        for i, ch in enumerate(name):
            sub = self.variant_map.get(ch)
            if sub is not None:
                out.append(name[:i] + sub + name[i + 1:])
        return out

    def __call__(self, name: str, index: NameIndex, facility_hint: Optional[str] = None) -> Optional[EmployeeRecord]:
        for cand in self.candidates(name):
            hit = match_exact(cand, index) or match_normalized(cand, index)
            if hit is not None:
                return hit
        return None


def match_unique_surname(name: str, index: NameIndex, facility_hint: Optional[str] = None) -> Optional[EmployeeRecord]:
    surname = first_token(name)
    if not surname:
        return None
    bucket = index.surname_bucket(surname)
    if len(bucket) == 1:
        return bucket[0]
    if len(bucket) > 1 and facility_hint:
        at_facility = [e for e in bucket if e.facility == facility_hint]
        if len(at_facility) == 1:
            return at_facility[0]
    return None


class PrefixStrategy:
    def __init__(self, min_length: int = 2):
        self.min_length = min_length

    def __call__(self, name: str, index: NameIndex, facility_hint: Optional[str] = None) -> Optional[EmployeeRecord]:
        needle = strip_spaces(name)
        if len(needle) < self.min_length:
            return None
        hits = [e for stripped, e in index.stripped_names
                if len(stripped) > len(needle) and stripped.startswith(needle)]
        if len(hits) == 1:
            return hits[0]
        return None


def build_strategies(settings: MatchingSettings) -> List[Tuple[MatchStrategy, StrategyFn]]:
    """The cascade, in priority order, as (MatchStrategy, callable) pairs."""
    return [
        (MatchStrategy.EXACT, match_exact),
        (MatchStrategy.NORMALIZED, match_normalized),
        (MatchStrategy.ALIAS, match_alias),
        (MatchStrategy.VARIANT, VariantStrategy(settings.variant_map())),
        (MatchStrategy.SURNAME, match_unique_surname),
        (MatchStrategy.PREFIX, PrefixStrategy(settings.min_prefix_length)),
    ]


class NameMatcher:
    """Build once per directory, then call match() per roster cell."""

    def __init__(
        self,
        directory: EmployeeDirectory,
        settings: Optional[MatchingSettings] = None,
        strategies: Optional[Sequence[tuple]] = None,
    ):
        self.settings = settings or get_settings().matching
        self.directory = directory
        self.normalize = Normalizer(self.settings.normalization_table)
        self.index = NameIndex(directory, self.normalize)
        self.strategies = list(strategies) if strategies is not None else build_strategies(self.settings)

    @property
    def strategy_order(self) -> List[MatchStrategy]:
        return [kind for kind, _ in self.strategies]

    def match(self, raw_name: str, facility_hint: Optional[str] = None) -> MatchResult:
        name = str(raw_name or "").strip()
        if not name:
            return NO_MATCH
        for kind, strategy in self.strategies:
            emp = strategy(name, self.index, facility_hint)
            if emp is not None:
                return MatchResult(emp, kind)
        return NO_MATCH
