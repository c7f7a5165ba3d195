import pytest

from roster_reconcile.config import AppSettings, CleaningSettings
from roster_reconcile.processors import clean_name, normalize_time_slot


@pytest.mark.parametrize("cell, expected", [
    ("沼田-8", "沼田"),
    ("青木19-", "青木"),
    ("マイ16半", "マイ"),
    ("田代-20", "田代"),
    ("細谷18-", "細谷"),
    ("小川20半-", "小川"),
    ("伊藤園19-", "伊藤園"),
    ("向井7半", "向井"),
    ("星野⁻8半", "星野"),
    ("19-武田", "武田"),
    ("★柳 幸子", "柳 幸子"),
    ("  青木 太郎 ", "青木 太郎"),
    ("ルーシー", "ルーシー"),
])
def test_clean_name_strips_hour_notes(cell, expected):
    assert clean_name(cell) == expected


@pytest.mark.parametrize("cell", ["空き", "職員配置不要", "欠員(募集中)", "", None, "★"])
def test_placeholders_are_empty(cell):
    assert clean_name(cell) == ""


def test_custom_placeholder_words():
    assert clean_name("休み", CleaningSettings(placeholder_words=["休み"])) == ""


@pytest.mark.parametrize("label, expected", [
    ("17時～", "17時～22時"),
    (" 17時～ ", "17時～22時"),
    ("22時～", "22時～"),
    ("6時～9時", "6時～9時"),
    ("", ""),
    (None, ""),
])
def test_normalize_time_slot(label, expected):
    assert normalize_time_slot(label) == expected


def test_normalize_time_slot_follows_settings():
    s = AppSettings()
    s.shifts.evening_start = "17時～21時"
    assert normalize_time_slot("17時～", s) == "17時～21時"
