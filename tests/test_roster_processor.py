from roster_reconcile.processors import RosterProcessor


RECORDS = [
    {"date": "2025/10/05", "facility": "南大泉", "timeSlot": "17時～", "personLabel": "柳幸子"},
    {"date": "2025/10/05", "facility": "南大泉", "timeSlot": "22時～", "personLabel": "柳 幸子"},
    {"date": "2025/10/06", "facility": "南大泉", "timeSlot": "6時～9時", "personLabel": "柳幸子★"},
    {"date": "2025/10/06", "facility": "南大泉", "timeSlot": "17時～22時", "personLabel": "空き"},
    {"date": "2025/10/06", "facility": "世田谷B", "timeSlot": "22時～", "personLabel": "イチロー-8"},
    {"date": "2025/10/07", "facility": "世田谷B", "timeSlot": "6時～9時", "personLabel": "鈴木 一郎"},
    {"date": "2025/10/07", "facility": "世田谷B", "timeSlot": "6時～9時", "personLabel": "名無し"},
]


def test_process_end_to_end(directory, settings):
    out = RosterProcessor(settings).process(RECORDS, directory)

    assert out["shifts_by_employee"] == {
        "001": [{"date": "2025/10/05", "facility": "南大泉", "timeSlot": "17時～翌9時", "merged": True}],
        "006": [{"date": "2025/10/06", "facility": "世田谷B", "timeSlot": "22時～翌9時", "merged": True}],
    }
    assert out["counts"]["skipped_cells"] == 1
    assert out["counts"]["employees"] == 2
    assert [u["personLabel"] for u in out["unmatched"]] == ["名無し"]

    summary = out["summary"]
    assert list(summary["Employee No"]) == ["001", "006"]
    assert list(summary["Merged"]) == [1, 1]


def test_clean_records_keeps_raw_label(settings):
    cleaned = RosterProcessor(settings).clean_records([
        {"date": "2025/10/05", "facility": "A", "timeSlot": " 17時～ ", "personLabel": "青木19-"},
    ])
    assert cleaned == [{
        "date": "2025/10/05",
        "facility": "A",
        "timeSlot": "17時～22時",
        "personLabel": "青木",
        "rawLabel": "青木19-",
    }]


def test_unmatched_records_are_reported_not_dropped(directory):
    out = RosterProcessor().process(
        [{"date": "2025/10/05", "facility": "A", "timeSlot": "6時～9時", "personLabel": "青木"}],
        directory,
    )
    assert out["match_results"][0]["employeeNo"] is None
    assert out["unmatched"][0]["personLabel"] == "青木"
    assert out["shifts_by_employee"] == {}
    assert out["summary"].empty
