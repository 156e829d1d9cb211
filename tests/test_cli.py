import json

import pytest

from timecard import cli
from timecard.core.config import Settings
from timecard.models import TEMPLATE_LABEL
from timecard.pay_periods import current_period
from timecard.storage import filename_for


@pytest.fixture
def settings(tmp_path, monkeypatch):
    settings = Settings(data_dir=tmp_path, autosave_delay_seconds=30)
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    return settings


def test_periods_lists_template_and_marks_current(capsys, settings):
    assert cli.main(["periods"]) == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0].strip() == TEMPLATE_LABEL
    assert len(lines) == 7
    assert [line for line in lines if line.startswith("*")] == [f"* {current_period().label}"]


def test_set_time_saves_before_exit(capsys, settings):
    assert cli.main(["set-time", "0", "09:00", "17:00"]) == 0

    out = capsys.readouterr().out
    assert "Week 1 total: 8.00" in out
    assert "9:00AM - 5:00PM" in out
    saved = json.loads((settings.saves_dir / filename_for(current_period().label)).read_text())
    assert saved["week1"][0]["timePairs"] == [{"start": "09:00", "stop": "17:00"}]
    assert saved["week1"][0]["total"] == 8.0


def test_template_edits_go_to_template_file(capsys, settings):
    assert cli.main(["day-type", "2", "holiday", "--period", TEMPLATE_LABEL]) == 0

    assert (settings.saves_dir / "template.json").exists()
    assert "Holiday" in capsys.readouterr().out


def test_clock_in_outside_current_period_fails(capsys, settings):
    assert cli.main(["clock-in", "--at", "2020-01-06T09:00:00"]) == 1

    assert "Cannot clock in - not within current pay period" in capsys.readouterr().err


def test_unknown_period_is_an_error(capsys, settings):
    assert cli.main(["show", "--period", "1/1/1999 - 1/14/1999"]) == 1

    assert "Unknown pay period" in capsys.readouterr().err


def test_prefs_updates_preferences_file(capsys, settings):
    assert cli.main(["prefs", "--employee-name", "Avery Lane", "--salary-mode"]) == 0

    out = capsys.readouterr().out
    assert "employeeName: Avery Lane" in out
    assert "salaryMode: True" in out
    saved = json.loads(settings.preferences_path.read_text())
    assert saved["salaryMode"] is True


def test_salary_mode_hides_overtime_line(capsys, settings):
    cli.main(["prefs", "--salary-mode"])
    capsys.readouterr()

    cli.main(["show"])

    assert "Overtime" not in capsys.readouterr().out


def test_submit_requires_server_url(capsys, settings):
    assert cli.main(["submit"]) == 1

    assert "Server URL not configured" in capsys.readouterr().err
