"""
Take the quiz in a terminal and optionally submit the result.

Usage (from backend/):
  python -m pcbvalues.scripts.take_quiz            # full edition
  python -m pcbvalues.scripts.take_quiz --short --shuffle

Answer with 1-5 (strongly agree .. strongly disagree), or 1/5 on yes/no
questions; "b" goes back one question, "q" quits.
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Callable, List, Optional

from pcbvalues.components.scoring import quiz
from pcbvalues.components.scoring.catalog import (
    RESPONSE_BUTTONS,
    button_weight,
    find_tier,
    load_axes,
    load_questions,
    select_questions,
    visible_buttons,
)
from pcbvalues.components.submissions.guard import SubmissionGuard, SubmissionState
from pcbvalues.components.submissions.local_store import LocalSessionStore
from pcbvalues.components.submissions.payload import record_result
from pcbvalues.platform.brand import BRAND_NAME, brand_result_url
from pcbvalues.platform.config import settings

QUIT = "q"
BACK = "b"


class ConsolePrompts:
    def __init__(self, read: Callable[[str], str] = input):
        self.read = read

    def ask_name(self, message: str) -> Optional[str]:
        try:
            return self.read(f"{message}\n> ")
        except EOFError:
            return None

    def confirm(self, message: str) -> bool:
        try:
            return self.read(f"{message} [y/N] ").strip().lower() in ("y", "yes")
        except EOFError:
            return False


def _ask(state: quiz.QuizState, read: Callable[[str], str]) -> str:
    buttons = visible_buttons(state.questions[state.index])
    choices = "/".join(str(i + 1) for i in buttons)
    prompt = f"\n[{state.display_index}/{state.total}] {state.current_text}\n({choices}, {BACK}=back, {QUIT}=quit) "
    while True:
        raw = read(prompt).strip().lower()
        if raw in (QUIT, BACK):
            return raw
        if raw.isdigit() and int(raw) - 1 in buttons:
            return raw
        print(f"Please answer with one of {choices}.")


def run_quiz(state: quiz.QuizState, read: Callable[[str], str] = input) -> Optional[List[float]]:
    """Drive one session to completion; ``None`` when the user leaves early."""
    while True:
        choice = _ask(state, read)
        if choice == QUIT:
            return None
        if choice == BACK:
            state, moved = quiz.back(state)
            if not moved:
                return None
            continue
        state, more = quiz.answer(state, button_weight(int(choice) - 1))
        if not more:
            return quiz.finalize(state)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=f"Take the {BRAND_NAME} quiz in the terminal.")
    parser.add_argument("--short", action="store_true", help="Short edition")
    parser.add_argument("--shuffle", action="store_true", help="Shuffle question order")
    parser.add_argument("--name", default=None, help="Name to submit the result under")
    parser.add_argument("--no-submit", action="store_true", help="Only show the result")
    args = parser.parse_args(argv)

    config = settings.quiz_config
    edition = quiz.Edition.SHORT if args.short else quiz.Edition.FULL
    questions = select_questions(
        load_questions(settings.questions_path, config.axis_count),
        short=args.short,
        shuffle=args.shuffle,
    )
    axes = load_axes(settings.values_path)

    print(f"{BRAND_NAME}, {edition.label}: {len(questions)} questions, {len(RESPONSE_BUTTONS)} possible answers each.")
    scores = run_quiz(quiz.start(questions, edition), input)
    if scores is None:
        print("Quiz abandoned.", file=sys.stderr)
        sys.exit(1)

    store = LocalSessionStore(settings.LOCAL_STORE_PATH)
    query = asyncio.run(record_result(scores, edition, store))

    print()
    for axis, score in zip(axes, scores):
        print(f"{axis.name:>10}: {score:5.1f}%  {find_tier(score, axis.tiers)}")
    print(f"\nResults page: {brand_result_url(query)}")

    if args.no_submit:
        return

    guard = SubmissionGuard(config, store, ConsolePrompts())
    warning = guard.check_duplicate(query)
    if warning:
        print(warning)
    state = asyncio.run(guard.submit(args.name, query))
    if state is SubmissionState.SUCCESS:
        print("Scores submitted.")
    elif state is SubmissionState.FAILED:
        path = guard.export_failed_payload()
        print(f"{guard.last_error}. Your scores were saved to {path}; send that file in manually.", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
