"""Tests for the courier example functions and rules."""

import json

import pytest

from obey.demo import DEMO_RULES, FUNCTIONS, get_courier, log_courier_info
from obey.engine import RuleEngine
from obey.models import RuleStatus
from obey.reporting import CollectingReporter


class TestCourierFunctions:
    @pytest.mark.asyncio
    async def test_get_courier_uses_params(self):
        courier = await get_courier({"courierId": "abc"})
        assert courier["id"] == "abc"
        assert courier["status"] == 200
        assert courier["courierInfo"]["warehouse"] == "Izmir"

    @pytest.mark.asyncio
    async def test_get_courier_without_params(self):
        courier = await get_courier()
        assert courier["id"] is None

    @pytest.mark.asyncio
    async def test_log_courier_info_prints_json(self, capsys):
        await log_courier_info({"status": 200, "vehicle": "Car"}, {"success": True})
        captured = capsys.readouterr()
        assert captured.out == ""
        data = json.loads(captured.err)
        assert data == {"courierInfo": {"status": 200, "vehicle": "Car"}, "params": {"success": True}}

    def test_registered_under_original_names(self):
        assert set(FUNCTIONS) == {"getCourier", "logCourierInfo"}


class TestDemoRules:
    @pytest.mark.asyncio
    async def test_first_fires_second_skips(self, capsys):
        reporter = CollectingReporter()
        engine = RuleEngine(FUNCTIONS, reporter)
        engine.add_rules(DEMO_RULES)
        report = await engine.run()
        assert [o.status for o in report.outcomes] == [RuleStatus.FIRED, RuleStatus.SKIPPED]
        assert reporter.messages == []
        assert "Rule work with success!" in capsys.readouterr().err
