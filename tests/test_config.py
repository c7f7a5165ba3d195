import pytest
from pydantic import ValidationError

from roster_reconcile.config import (
    AppSettings,
    DEFAULT_NORMALIZATION_TABLE,
    ShiftSettings,
    get_settings,
    reset_settings,
    update_settings,
)


def test_defaults():
    s = AppSettings()
    assert len(s.matching.normalization_table) == 15
    assert s.matching.min_prefix_length == 2
    assert s.shifts.evening_start == "17時～22時"


def test_defaults_are_not_shared():
    a, b = AppSettings(), AppSettings()
    a.matching.normalization_table["x"] = "y"
    assert "x" not in b.matching.normalization_table
    assert "x" not in DEFAULT_NORMALIZATION_TABLE


def test_update_and_reset():
    custom = AppSettings()
    custom.matching.min_prefix_length = 3
    update_settings(custom)
    assert get_settings().matching.min_prefix_length == 3
    reset_settings()
    assert get_settings().matching.min_prefix_length == 2


def test_round_trip_through_json():
    s = AppSettings()
    restored = AppSettings.model_validate_json(s.model_dump_json())
    assert restored == s


def test_late_slot_labels_need_leading_hour():
    with pytest.raises(ValidationError):
        ShiftSettings(late_night="深夜")
    with pytest.raises(ValidationError):
        ShiftSettings(late_evening_alt="夜～")
    assert ShiftSettings(late_night="23時～").late_night == "23時～"
