from datetime import date

import pytest

from roster_reconcile.config import AppSettings, reset_settings
from roster_reconcile.directory import EmployeeDirectory
from roster_reconcile.processors import NameMatcher, RawShiftEntry


DIRECTORY_ROWS = [
    {"employeeNo": "1", "canonicalName": "柳 幸子", "status": "Active", "aliases": "柳幸子", "facility": "南大泉"},
    {"employeeNo": "2", "canonicalName": "青木 太郎", "status": "Active", "aliases": "", "facility": "南大泉"},
    {"employeeNo": "3", "canonicalName": "青木 花子", "status": "Active", "aliases": "", "facility": "世田谷B"},
    {"employeeNo": "4", "canonicalName": "髙橋 一郎", "status": "在職", "aliases": "", "facility": "南大泉"},
    {"employeeNo": "5", "canonicalName": "佐藤 恵", "status": "退職", "aliases": "さとう", "facility": "南大泉"},
    {"employeeNo": "6", "canonicalName": "鈴木 一郎", "status": "Active", "aliases": "イチロー, スズイチ", "facility": "世田谷B"},
    {"employeeNo": "7", "canonicalName": "田中 美咲", "status": "Active", "aliases": "", "facility": "世田谷B"},
    {"employeeNo": "8", "canonicalName": "山田 花子", "status": "Active", "aliases": "", "facility": ""},
    {"employeeNo": "9", "canonicalName": "髙松 亮", "status": "Active", "aliases": "", "facility": "南大泉"},
]


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings():
    return AppSettings()


@pytest.fixture
def directory():
    return EmployeeDirectory.from_rows(DIRECTORY_ROWS)


@pytest.fixture
def matcher(directory, settings):
    return NameMatcher(directory, settings.matching)


@pytest.fixture
def entry():
    def make(d, facility, slot, person="柳 幸子"):
        if isinstance(d, tuple):
            d = date(*d)
        return RawShiftEntry(date=d, facility=facility, time_slot=slot, person_label=person)
    return make
