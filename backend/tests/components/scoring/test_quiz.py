"""Tests for the quiz engine state machine and score reduction."""

import pytest

from pcbvalues.components.scoring import quiz
from pcbvalues.components.scoring.catalog import button_weight
from pcbvalues.components.scoring.codec import decode
from pcbvalues.components.scoring.digest import verify
from pcbvalues.components.scoring.quiz import Edition
from pcbvalues.components.scoring.schemas import Question
from pcbvalues.components.submissions.payload import ResultParams
from pcbvalues.shared.errors import InvalidScore, OutOfRange, RangeError


def _seven_axis_questions():
    questions = []
    for axis in range(7):
        effect = [0] * 7
        effect[axis] = 10
        questions.append(Question(text=f"Axis {axis} positive", flags=1, effect=effect))
        effect = [0] * 7
        effect[axis] = -5
        effect[(axis + 1) % 7] = 5
        questions.append(Question(text=f"Axis {axis} mixed", flags=2, effect=effect))
    return questions


def _answer_all(state, weight):
    more = True
    while more:
        state, more = quiz.answer(state, weight)
    return state


class TestTransitions:
    def test_initial_state(self):
        state = quiz.start(_seven_axis_questions(), Edition.SHORT)
        assert state.index == 0
        assert state.answers == (0.0,) * 14
        assert state.edition is Edition.SHORT
        assert state.display_index == 1
        assert state.total == 14
        assert state.current_text == "Axis 0 positive"
        assert state.current_is_yes_no is False

    def test_answer_returns_new_state(self):
        start = quiz.start(_seven_axis_questions())
        nxt, more = quiz.answer(start, 1)
        assert more is True
        assert start.index == 0
        assert start.answers[0] == 0.0
        assert nxt.index == 1
        assert nxt.answers[0] == 1.0
        assert nxt.current_is_yes_no is True

    def test_last_answer_reports_no_more_questions(self):
        questions = [Question(text="only", effect=[1, 1])]
        state, more = quiz.answer(quiz.start(questions), 0.5)
        assert more is False
        assert state.completed

    def test_back_from_first_question_signals_exit(self):
        state = quiz.start(_seven_axis_questions())
        same, moved = quiz.back(state)
        assert moved is False
        assert same is state

    def test_back_keeps_previous_answers(self):
        state = quiz.start(_seven_axis_questions())
        state, _ = quiz.answer(state, -1)
        state, _ = quiz.answer(state, 0.5)
        state, moved = quiz.back(state)
        assert moved is True
        assert state.index == 1
        assert state.answers[:2] == (-1.0, 0.5)
        state, moved = quiz.back(state)
        assert moved is True
        assert state.index == 0

    def test_back_from_first_answered_question_returns_to_start(self):
        state, _ = quiz.answer(quiz.start(_seven_axis_questions()), 1)
        state, moved = quiz.back(state)
        assert moved is True
        assert state.display_index == 1

    def test_queries_fail_after_completion(self):
        state = _answer_all(quiz.start(_seven_axis_questions()), 0)
        with pytest.raises(OutOfRange):
            state.current_text
        with pytest.raises(OutOfRange):
            state.current_is_yes_no
        with pytest.raises(OutOfRange):
            state.display_index

    def test_answer_after_completion_fails(self):
        state = _answer_all(quiz.start(_seven_axis_questions()), 0)
        with pytest.raises(OutOfRange):
            quiz.answer(state, 0)

    def test_answer_rejects_unknown_weight(self):
        with pytest.raises(RangeError):
            quiz.answer(quiz.start(_seven_axis_questions()), 0.3)

    def test_button_weights_are_accepted(self):
        state = quiz.start(_seven_axis_questions())
        for i in range(5):
            state, _ = quiz.answer(state, button_weight(i))
        assert state.answers[:5] == (1.0, 0.5, 0.0, -0.5, -1.0)


class TestFinalize:
    def test_all_neutral_answers_give_fifty(self):
        state = _answer_all(quiz.start(_seven_axis_questions()), 0)
        assert quiz.finalize(state) == [50.0] * 7

    def test_single_question_full_agreement(self):
        state, _ = quiz.answer(quiz.start([Question(text="q", effect=[10, -10])]), 1)
        assert quiz.finalize(state) == [100.0, 0.0]

    def test_weighted_sum(self):
        questions = [
            Question(text="a", effect=[10, 5]),
            Question(text="b", effect=[-10, 5]),
        ]
        state = quiz.replay(questions, Edition.FULL, [1, 0.5])
        assert quiz.finalize(state) == [62.5, 87.5]

    def test_extremes_stay_in_bounds(self):
        for weight in (1, -1):
            scores = quiz.finalize(_answer_all(quiz.start(_seven_axis_questions()), weight))
            assert all(0 <= s <= 100 for s in scores)

    def test_same_answers_same_vector(self):
        answers = [1, 0.5, 0, -0.5, -1, 1, 0.5, 0, -0.5, -1, 1, 0.5, 0, -0.5]
        first = quiz.finalize(quiz.replay(_seven_axis_questions(), Edition.FULL, answers))
        second = quiz.finalize(quiz.replay(_seven_axis_questions(), Edition.FULL, answers))
        assert first == second

    def test_unfinished_quiz_cannot_finalize(self):
        state, _ = quiz.answer(quiz.start(_seven_axis_questions()), 1)
        with pytest.raises(OutOfRange):
            quiz.finalize(state)

    def test_axis_without_effects_is_invalid(self):
        state, _ = quiz.answer(quiz.start([Question(text="q", effect=[10, 0])]), 1)
        with pytest.raises(InvalidScore):
            quiz.finalize(state)

    def test_empty_quiz_is_invalid(self):
        with pytest.raises(InvalidScore):
            quiz.finalize(quiz.start([]))

    def test_inconsistent_effect_lengths_are_invalid(self):
        questions = [Question(text="a", effect=[1, 1]), Question(text="b", effect=[1])]
        state = quiz.replay(questions, Edition.FULL, [1, 1])
        with pytest.raises(InvalidScore):
            quiz.finalize(state)

    def test_replay_rejects_wrong_answer_count(self):
        with pytest.raises(OutOfRange):
            quiz.replay(_seven_axis_questions(), Edition.FULL, [0, 0])


class TestResultQuery:
    def test_query_round_trips_through_result_params(self):
        scores = [62.5, 80.4, 45.8, 27.1, 41.7, 35, 70]
        query = quiz.build_result_query(scores, Edition.SHORT)
        assert query.startswith("score=62.5%2C80.4%2C45.8")
        params = ResultParams.from_query(query)
        assert params.edition == "s"
        assert params.score == "62.5,80.4,45.8,27.1,41.7,35.0,70.0"
        assert decode(params.score, 7) == [62.5, 80.4, 45.8, 27.1, 41.7, 35.0, 70.0]
        assert verify(params.score, params.digest)

    @pytest.mark.parametrize("raw,expected", [("s", Edition.SHORT), ("S", Edition.SHORT), ("f", Edition.FULL), (None, Edition.FULL), ("missing", Edition.FULL)])
    def test_edition_parse(self, raw, expected):
        assert Edition.parse(raw) is expected
