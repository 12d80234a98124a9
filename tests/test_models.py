#!/usr/bin/env python3
"""Unit tests for Record decoding."""

import pytest

from mrf_filter.models import FileLocation, Plan, Record, RecordDecodeError


class TestRecordFromJson:

    def test_full_record(self):
        rec = Record.from_json({
            "reporting_plans": [{"plan_name": "Anthem PPO", "plan_id": "123"}],
            "in_network_files": [{"description": "NY", "location": "https://x/a.json.gz"}],
            "allowed_amount_file": {"location": "ignored"},
        })
        assert rec.plans == (Plan(name="Anthem PPO"),)
        assert rec.files == (FileLocation(description="NY", location="https://x/a.json.gz"),)

    def test_missing_and_null_fields_are_empty(self):
        assert Record.from_json({}) == Record()
        rec = Record.from_json({"reporting_plans": None,
                                "in_network_files": [{"location": None}, None]})
        assert rec.plans == ()
        assert rec.files == (FileLocation(), FileLocation())

    def test_null_element_is_empty_record(self):
        assert Record.from_json(None) == Record()

    @pytest.mark.parametrize("element", [
        42,
        "a string",
        [1, 2],
        {"reporting_plans": "Anthem PPO"},
        {"reporting_plans": ["Anthem PPO"]},
        {"reporting_plans": [{"plan_name": 7}]},
        {"in_network_files": {"location": "x"}},
        {"in_network_files": [{"location": ["x"]}]},
        {"in_network_files": [{"description": False, "location": "x"}]},
    ])
    def test_wrong_types_raise(self, element):
        with pytest.raises(RecordDecodeError):
            Record.from_json(element)

    def test_record_is_immutable(self):
        rec = Record()
        with pytest.raises(AttributeError):
            rec.plans = (Plan("x"),)
