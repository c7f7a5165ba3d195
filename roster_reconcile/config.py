"""
Reconciliation configuration with all adjustable settings.
Tables that used to live as module constants in the roster scripts are passed
into the matcher and consolidator through these models.
"""
import re

from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Tuple


LEADING_HOUR_RE = re.compile(r"^\d+時")


# Legacy / variant kanji → standard form (one-way, comparison keys only)
DEFAULT_NORMALIZATION_TABLE: Dict[str, str] = {
    "﨑": "崎",
    "髙": "高",
    "澤": "沢",
    "櫻": "桜",
    "壽": "寿",
    "惠": "恵",
    "张": "張",
    "单": "単",
    "單": "単",
    "华": "華",
    "云": "雲",
    "艳": "艶",
    "邊": "辺",
    "邉": "辺",
    "濱": "浜",
}

# Interchangeable pairs; each side may stand in for the other
DEFAULT_VARIANT_PAIRS: List[Tuple[str, str]] = [
    ("﨑", "崎"),
    ("髙", "高"),
    ("澤", "沢"),
    ("惠", "恵"),
]


class MatchingSettings(BaseModel):
    """Settings for roster name matching"""
    normalization_table: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_NORMALIZATION_TABLE),
        description="One-way variant → standard character substitutions",
    )
    variant_pairs: List[Tuple[str, str]] = Field(
        default_factory=lambda: list(DEFAULT_VARIANT_PAIRS),
        description="Bidirectional interchangeable character pairs",
    )
    min_prefix_length: int = Field(2, ge=1, description="Shortest input accepted by prefix inference")
    facility_surname_hints: Dict[str, Dict[str, str]] = Field(
        default_factory=dict,
        description="facility → {surname → employeeNo} used by the batch second pass",
    )
    suggestion_limit: int = Field(3, ge=0, description="Fuzzy suggestions listed per unmatched name")
    suggestion_min_score: int = Field(60, ge=0, le=100, description="Minimum fuzz.ratio for a suggestion")

    def variant_map(self) -> Dict[str, str]:
        vmap: Dict[str, str] = {}
        for a, b in self.variant_pairs:
            vmap[a] = b
            vmap[b] = a
        return vmap


class ShiftSettings(BaseModel):
    """Time-slot labels that take part in overnight merging"""
    early_morning: str = Field("6時～9時", description="Morning slot closing an overnight duty")
    evening_start: str = Field("17時～22時", description="Evening slot opening an overnight duty")
    late_evening_alt: str = Field("21時～", description="Alternate late start")
    late_night: str = Field("22時～", description="Late-night slot")
    full_overnight_label: str = Field("17時～翌9時", description="Evening + night + next morning")
    open_overnight_label: str = Field("17時～翌朝", description="Evening + night, no morning record")
    late_start_label: str = Field("{hour}時～翌9時", description="Night + next morning, {hour} = start hour")
    slot_ranks: Dict[int, int] = Field(
        default_factory=lambda: {6: 1, 17: 3, 21: 4, 22: 5},
        description="Leading hour → sort rank",
    )
    other_rank: int = Field(9, description="Rank for labels without a known leading hour")

    @field_validator("late_night", "late_evening_alt")
    @classmethod
    def _needs_leading_hour(cls, v: str) -> str:
        # merged late-start labels are built from this hour
        if not LEADING_HOUR_RE.match(v):
            raise ValueError(f"Late slot label {v!r} must start with an hour such as '22時'")
        return v


class CleaningSettings(BaseModel):
    """Settings for raw roster cell cleanup"""
    placeholder_words: List[str] = Field(
        default_factory=lambda: ["空き", "職員配置不要", "配置不要", "欠員", "募集中"],
        description="Cells containing any of these are empty slots, not names",
    )
    short_evening_label: str = Field("17時～", description="Abbreviated evening label seen in rosters")


class DirectorySettings(BaseModel):
    """Settings for loading the employee master list"""
    employee_no_width: int = Field(3, ge=1, description="Zero-pad width for employee numbers")
    active_labels: List[str] = Field(default_factory=lambda: ["Active", "active", "在職"])
    retired_labels: List[str] = Field(default_factory=lambda: ["Retired", "retired", "退職"])


class AppSettings(BaseModel):
    """Main settings container"""
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    shifts: ShiftSettings = Field(default_factory=ShiftSettings)
    cleaning: CleaningSettings = Field(default_factory=CleaningSettings)
    directory: DirectorySettings = Field(default_factory=DirectorySettings)


# Global settings instance
_current_settings = AppSettings()


def get_settings() -> AppSettings:
    """Get current settings"""
    return _current_settings


def update_settings(new_settings: AppSettings) -> AppSettings:
    """Update settings"""
    global _current_settings
    _current_settings = new_settings
    return _current_settings


def reset_settings() -> AppSettings:
    """Reset to default settings"""
    global _current_settings
    _current_settings = AppSettings()
    return _current_settings
