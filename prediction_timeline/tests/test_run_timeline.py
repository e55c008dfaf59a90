"""
Tests for the command line runner.
"""

from datetime import date, datetime, timezone
from unittest.mock import patch, MagicMock

import pytest

from prediction_timeline import run_timeline
from prediction_timeline.storage.db import Prediction, AlreadySubmittedError


ENV = {'SUPABASE_URL': 'https://x.supabase.co', 'SUPABASE_ANON_KEY': 'k'}


def make_prediction(pid, d, session):
    return Prediction(id=pid, name=f"P{pid}", prediction_date=d,
                      created_at=None, user_session=session)


@pytest.fixture
def store():
    store = MagicMock()
    store.fetch_predictions.return_value = [make_prediction(1, date(2025, 3, 1), "other")]
    store.find_by_session.return_value = None
    return store


@pytest.fixture
def runner(store, monkeypatch):
    """Patch out files, logging and the network."""
    for name, value in ENV.items():
        monkeypatch.setenv(name, value)
    with patch.object(run_timeline, 'setup_file_logging'), \
         patch.object(run_timeline, 'log_startup_diagnostics'), \
         patch.object(run_timeline, 'load_or_create_session', return_value="mine"), \
         patch.object(run_timeline, 'clear_session') as clear, \
         patch.object(run_timeline, 'PredictionStore', return_value=store):
        yield clear


def test_list(runner, capsys):
    assert run_timeline.main(["list"]) == run_timeline.EXIT_OK
    out = capsys.readouterr().out
    assert "Mar 1, 2025" in out
    assert "P1" in out


def test_list_marks_own_prediction(runner, store, capsys):
    store.fetch_predictions.return_value.append(make_prediction(2, date(2025, 7, 2), "mine"))
    run_timeline.main(["list"])
    assert "P2 (you)" in capsys.readouterr().out


def test_submit(runner, store, capsys):
    store.insert_prediction.return_value = make_prediction(2, date(2025, 7, 2), "mine")
    code = run_timeline.main(["submit", "--name", "Ada", "--date", "2025-07-02"])
    assert code == run_timeline.EXIT_OK
    assert "Jul 2, 2025" in capsys.readouterr().out


def test_submit_duplicate(runner, store):
    store.insert_prediction.side_effect = AlreadySubmittedError("dup", 409)
    code = run_timeline.main(["submit", "--name", "Ada", "--date", "2025-07-02"])
    assert code == run_timeline.EXIT_ALREADY_SUBMITTED


def test_list_shows_when_own_prediction_was_saved(runner, store, capsys):
    store.fetch_predictions.return_value.append(Prediction(
        id=2, name="Ada", prediction_date=date(2025, 7, 2),
        created_at=datetime(2025, 7, 2, 16, 0, tzinfo=timezone.utc), user_session="mine",
    ))
    run_timeline.main(["list"])
    out = capsys.readouterr().out
    assert "Your prediction was saved 2025-07-02" in out


def test_list_without_own_prediction_omits_saved_time(runner, capsys):
    run_timeline.main(["list"])
    assert "Your prediction was saved" not in capsys.readouterr().out


def test_new_session_clears(runner):
    run_timeline.main(["--new-session", "list"])
    runner.assert_called_once()


def test_missing_config(runner, monkeypatch, capsys):
    monkeypatch.delenv('SUPABASE_URL')
    monkeypatch.delenv('SB_URL', raising=False)
    assert run_timeline.main(["list"]) == run_timeline.EXIT_FAILED
    assert "SUPABASE_URL" in capsys.readouterr().err


def test_bad_date_exits():
    with pytest.raises(SystemExit):
        run_timeline.parse_args(["submit", "--name", "Ada", "--date", "someday"])


@pytest.mark.parametrize("name,value", [
    ("PREDICTION_TIMELINE_WIDTH", "0"),
    ("PREDICTION_TIMELINE_WIDTH", "wide"),
    ("PREDICTION_TIMELINE_START", "2025-12-31"),
    ("PREDICTION_TIMELINE_TIMEOUT", "-1"),
])
def test_bad_timeline_settings_exit(runner, monkeypatch, capsys, name, value):
    monkeypatch.setenv(name, value)
    assert run_timeline.main(["list"]) == run_timeline.EXIT_FAILED
    assert name in capsys.readouterr().err
