"""Tests for the timeboxer CLI commands."""

import json

from cli.cli import app

MEETING = {
    "id": "evt-1",
    "title": "Standup",
    "start": "2024-01-15T10:00:00",
    "end": "2024-01-15T10:30:00",
    "calendar": "Office",
}

HOLIDAY = {
    "id": "evt-2",
    "title": "Company offsite",
    "start": "2024-01-15T00:00:00",
    "end": "2024-01-16T00:00:00",
    "calendar": "Office",
    "is_all_day": True,
}


def test_presets_lists_builtin_keys(runner):
    result = runner.invoke(app, ["--log-level", "ERROR", "presets"])
    assert result.exit_code == 0
    for key in ("standard_workday", "focus_day", "weekend", "light_day"):
        assert key in result.stdout


def test_preview_json(runner, write_events):
    events = write_events([MEETING, HOLIDAY])
    result = runner.invoke(
        app,
        ["--log-level", "ERROR", "preview", "--date", "2024-01-15", "--events", str(events), "--start", "09:00", "--no-planning", "--json"],
    )
    assert result.exit_code == 0, result.output

    payload = json.loads(result.stdout)
    assert payload["status"] == "complete"
    assert payload["message"] == "Successfully projected 7 sessions."
    first, second = payload["sessions"][:2]
    assert (first["category"], first["start"], first["end"]) == ("work", "2024-01-15T09:00:00", "2024-01-15T09:40:00")
    assert (second["category"], second["start"]) == ("side", "2024-01-15T10:40:00")


def test_preview_counts_existing_sessions_and_planning(runner, write_events):
    planning = {"title": "Planning", "start": "2024-01-15T08:00:00", "end": "2024-01-15T08:15:00", "notes": "#plan"}
    done = {"title": "Work Session", "start": "2024-01-15T08:20:00", "end": "2024-01-15T09:00:00", "calendar": "Work", "notes": "#work"}
    events = write_events([planning, done])
    result = runner.invoke(
        app,
        ["--log-level", "ERROR", "preview", "-d", "2024-01-15", "-e", str(events), "-s", "09:00", "--json"],
    )
    assert result.exit_code == 0, result.output

    payload = json.loads(result.stdout)
    categories = [session["category"] for session in payload["sessions"]]
    assert "planning" not in categories
    assert categories.count("work") == 4
    assert payload["message"].endswith("(Found 1 existing sessions)")


def test_preview_counts_only_session_calendars(runner, write_events):
    tagged = {"title": "Draft", "start": "2024-01-15T07:00:00", "end": "2024-01-15T07:40:00", "calendar": "Work", "notes": "#work"}
    elsewhere = {"title": "Review", "start": "2024-01-15T07:00:00", "end": "2024-01-15T07:30:00", "calendar": "Office", "notes": "#work"}
    events = write_events([tagged, elsewhere])

    result = runner.invoke(
        app,
        ["--log-level", "ERROR", "preview", "-d", "2024-01-15", "-e", str(events), "-s", "09:00", "--no-planning", "--json"],
    )
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["message"].endswith("(Found 1 existing sessions)")

    result = runner.invoke(
        app,
        ["--log-level", "ERROR", "preview", "-d", "2024-01-15", "-e", str(events), "-s", "09:00", "--no-planning", "--exclude-calendar", "Work", "--json"],
    )
    assert result.exit_code == 0, result.output
    assert "existing" not in json.loads(result.stdout)["message"]


def test_preview_task_titles_ignore_titles_on_other_calendars(runner, write_events, tmp_path):
    tasks = tmp_path / "work.txt"
    tasks.write_text("Draft\n\nReview\nShip\n", encoding="utf-8")
    meeting = {"title": "Review", "start": "2024-01-15T07:00:00", "end": "2024-01-15T07:30:00", "calendar": "Office"}
    done = {"title": "Draft", "start": "2024-01-15T07:00:00", "end": "2024-01-15T07:40:00", "calendar": "Work", "notes": "#work"}
    events = write_events([meeting, done])

    result = runner.invoke(
        app,
        ["--log-level", "ERROR", "preview", "-d", "2024-01-15", "-e", str(events), "-s", "09:00", "--no-planning", "--work-tasks", str(tasks), "--json"],
    )
    assert result.exit_code == 0, result.output

    titles = [s["title"] for s in json.loads(result.stdout)["sessions"] if s["category"] == "work"]
    assert titles[:2] == ["Review", "Ship"]
    assert titles[2:] == ["Work Session"] * 2


def test_preview_table(runner):
    result = runner.invoke(app, ["--log-level", "ERROR", "preview", "--date", "2024-01-15", "--preset", "light_day"])
    assert result.exit_code == 0, result.output
    assert "Projected sessions for 2024-01-15" in result.stdout
    assert "Successfully projected" in result.stdout


def test_preview_unknown_preset(runner):
    result = runner.invoke(app, ["--log-level", "ERROR", "preview", "--date", "2024-01-15", "--preset", "holiday"])
    assert result.exit_code == 2


def test_preview_bad_date(runner):
    result = runner.invoke(app, ["--log-level", "ERROR", "preview", "--date", "15/01/2024"])
    assert result.exit_code == 2


def test_preview_invalid_events_file(runner, write_events):
    events = write_events([{"title": "No times"}])
    result = runner.invoke(app, ["--log-level", "ERROR", "preview", "--date", "2024-01-15", "--events", str(events)])
    assert result.exit_code == 1


def test_availability_summary(runner, write_events):
    events = write_events([MEETING])
    result = runner.invoke(
        app,
        ["--log-level", "ERROR", "availability", "--date", "2024-01-15", "--events", str(events), "--start", "09:00", "--end", "12:00"],
    )
    assert result.exit_code == 0, result.output
    assert "Available: 2h 10m, longest gap 80m, up to 1 work / 2 side sessions" in result.stdout
