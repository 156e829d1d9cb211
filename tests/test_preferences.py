import json

from timecard.preferences import Preferences, PreferencesStore


def test_defaults_when_file_missing(tmp_path):
    preferences = PreferencesStore(tmp_path / "settings.json").load()

    assert preferences == Preferences()
    assert not preferences.auto_fill_from_template
    assert preferences.supervisor_token is None


def test_update_persists_camel_case_keys(tmp_path):
    path = tmp_path / "settings.json"
    store = PreferencesStore(path)

    store.update(employee_name="Avery Lane", salary_mode=True, server_url="http://approvals.local/ ")

    saved = json.loads(path.read_text())
    assert saved["employeeName"] == "Avery Lane"
    assert saved["salaryMode"] is True
    assert saved["serverUrl"] == "http://approvals.local"
    assert "supervisorToken" not in saved
    assert store.load().salary_mode


def test_update_keeps_existing_values(tmp_path):
    store = PreferencesStore(tmp_path / "settings.json")
    store.update(employee_name="Avery Lane")

    preferences = store.update(auto_fill_from_template=True)

    assert preferences.employee_name == "Avery Lane"
    assert preferences.auto_fill_from_template


def test_reads_camel_case_settings_and_ignores_unknown_keys(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"employeeName": "Sam", "showAddHoursButton": True, "theme": "dark"}))

    preferences = PreferencesStore(path).load()

    assert preferences.employee_name == "Sam"
    assert preferences.show_add_hours_button


def test_unreadable_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[]")

    assert PreferencesStore(path).load() == Preferences()
