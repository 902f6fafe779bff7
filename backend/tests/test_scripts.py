"""Operator and terminal scripts: population export, flag editing, quiz runner."""

import json
import sys

import pytest

from pcbvalues.components.scoring import quiz
from pcbvalues.components.scoring.schemas import Question
from pcbvalues.components.store.repository import ScoreStore
from pcbvalues.components.submissions.local_store import LocalSessionStore
from pcbvalues.components.submissions.payload import ResultParams
from pcbvalues.platform.config import settings
from pcbvalues.scripts import edit_flags, take_quiz
from pcbvalues.scripts.export_population import export_population
from pcbvalues.scripts.take_quiz import ConsolePrompts, run_quiz
from tests.conftest import SAMPLE_USERS, TestingSessionLocal


def test_export_population(db, tmp_path):
    store = ScoreStore(db, axis_count=7)
    for name, _, stats in SAMPLE_USERS[:3]:
        store.add(name, stats)

    out = tmp_path / "dist" / "users.json"
    assert export_population(store, out) == 3
    rows = json.loads(out.read_text(encoding="utf-8"))
    assert rows == [[name, 0, stats] for name, _, stats in SAMPLE_USERS[:3]]


@pytest.fixture
def run_edit_flags(db, monkeypatch):
    monkeypatch.setattr(edit_flags, "SessionLocal", TestingSessionLocal)

    def run(*args):
        monkeypatch.setattr(sys, "argv", ["edit_flags", *args])
        edit_flags.main()

    return run


def test_edit_flags_updates_record(db, run_edit_flags, capsys):
    ScoreStore(db, axis_count=7).add("alice", [50] * 7)
    run_edit_flags("alice", "1")
    assert "flags=1" in capsys.readouterr().out
    db.expire_all()
    assert ScoreStore(db, axis_count=7).find("alice").flags == 1


@pytest.mark.parametrize(
    "args,code",
    [
        (("alice",), 1),
        (("alice", "one"), 1),
        (("ghost", "1"), 2),
        (("alice", "-4"), 3),
    ],
)
def test_edit_flags_exit_codes(db, run_edit_flags, args, code):
    ScoreStore(db, axis_count=7).add("alice", [50] * 7)
    with pytest.raises(SystemExit) as exc_info:
        run_edit_flags(*args)
    assert exc_info.value.code == code


def _reader(*answers):
    pending = list(answers)

    def read(prompt):
        if not pending:
            raise EOFError
        return pending.pop(0)

    return read


class TestTakeQuiz:
    def _questions(self):
        return [
            Question(text="Agree?", effect=[10, 0]),
            Question(text="Yes or no?", flags=2, effect=[0, 10]),
        ]

    def test_completed_run(self):
        # "3" is not offered on a yes/no question and is asked again
        scores = run_quiz(quiz.start(self._questions()), _reader("1", "3", "5"))
        assert scores == [100.0, 0.0]

    def test_back_then_answer(self):
        scores = run_quiz(quiz.start(self._questions()), _reader("1", "b", "2", "1"))
        assert scores == [75.0, 100.0]

    def test_back_on_first_question_leaves(self):
        assert run_quiz(quiz.start(self._questions()), _reader("b")) is None
        assert run_quiz(quiz.start(self._questions()), _reader("q")) is None

    def test_console_prompts(self):
        prompts = ConsolePrompts(_reader("alice", "y", "n"))
        assert prompts.ask_name("Name?") == "alice"
        assert prompts.confirm("Sure?") is True
        assert prompts.confirm("Sure?") is False
        assert prompts.ask_name("Name?") is None
        assert prompts.confirm("Sure?") is False


def test_take_quiz_records_answer_time(tmp_path, monkeypatch, capsys):
    session_path = tmp_path / "session.json"
    monkeypatch.setattr(settings, "LOCAL_STORE_PATH", str(session_path))
    monkeypatch.setattr("builtins.input", _reader(*["1"] * 7))

    take_quiz.main(["--short", "--no-submit"])

    out = capsys.readouterr().out
    assert "Results page: https://" in out
    query = out.split("/results.html?", 1)[1].strip()
    digest = ResultParams.from_query(query).digest
    assert LocalSessionStore(session_path).answer_time(digest) is not None
