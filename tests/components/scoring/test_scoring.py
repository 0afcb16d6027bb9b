"""Tests for deterministic attempt scoring."""

import pytest

from hireperfect.components.scoring import service as scoring_service
from hireperfect.components.scoring.service import question_points, score_attempt, score_breakdown
from hireperfect.platform.config import settings


MCQ = {"id": "q1", "question_type": "mcq", "correct_option_id": "b"}
SCENARIO = {"id": "q2", "question_type": "scenario"}
CODING = {"id": "q3", "question_type": "coding"}


class TestQuestionPoints:
    def test_mcq_exact_match_scores_one(self):
        assert question_points(MCQ, {"question_id": "q1", "selected_option_id": "b"}) == 1.0

    def test_mcq_wrong_option_scores_zero(self):
        assert question_points(MCQ, {"question_id": "q1", "selected_option_id": "a"}) == 0.0

    def test_mcq_without_correct_option_never_scores(self):
        question = {"id": "q1", "question_type": "mcq"}
        assert question_points(question, {"question_id": "q1", "selected_option_id": None}) == 0.0

    def test_scenario_needs_more_than_twenty_trimmed_chars(self):
        exactly_twenty = "x" * 20
        assert question_points(SCENARIO, {"text_answer": exactly_twenty}) == 0.0
        assert question_points(SCENARIO, {"text_answer": "   " + "x" * 21 + "   "}) == 0.5

    def test_scenario_whitespace_padding_does_not_count(self):
        padded = " " * 50 + "short" + " " * 50
        assert question_points(SCENARIO, {"text_answer": padded}) == 0.0

    def test_coding_needs_more_than_thirty_trimmed_chars(self):
        assert question_points(CODING, {"code_answer": "y" * 30}) == 0.0
        assert question_points(CODING, {"code_answer": "y" * 31}) == 1.0

    def test_unanswered_and_unknown_types_score_zero(self):
        assert question_points(MCQ, None) == 0.0
        assert question_points({"id": "q9", "question_type": "essay"}, {"text_answer": "z" * 100}) == 0.0

    def test_threshold_follows_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "SCENARIO_MIN_ANSWER_CHARS", 3)
        assert question_points(SCENARIO, {"text_answer": "abcd"}) == 0.5


class TestScoreAttempt:
    def test_all_correct_is_not_always_hundred(self):
        # scenario caps at half a point, so the max for this mix is 2.5 / 3
        answers = [
            {"question_id": "q1", "selected_option_id": "b"},
            {"question_id": "q2", "text_answer": "A considered, complete answer."},
            {"question_id": "q3", "code_answer": "def reverse(s):\n    return s[::-1]\n"},
        ]
        assert score_attempt([MCQ, SCENARIO, CODING], answers) == pytest.approx(83.33)

    def test_normalized_by_question_count_not_answers(self):
        answers = [{"question_id": "q1", "selected_option_id": "b"}]
        assert score_attempt([MCQ, SCENARIO, CODING], answers) == pytest.approx(33.33)

    def test_no_answers_scores_zero(self):
        assert score_attempt([MCQ, SCENARIO], []) == 0.0

    def test_empty_exam_does_not_divide_by_zero(self):
        assert score_attempt([], [{"question_id": "q1", "selected_option_id": "b"}]) == 0.0

    def test_answers_for_unknown_questions_are_ignored(self):
        answers = [
            {"question_id": "ghost", "selected_option_id": "b"},
            {"question_id": "q1", "selected_option_id": "b"},
        ]
        assert score_attempt([MCQ], answers) == 100.0

    def test_question_ids_compare_as_strings(self):
        question = {"id": 7, "question_type": "mcq", "correct_option_id": "a"}
        assert score_attempt([question], [{"question_id": "7", "selected_option_id": "a"}]) == 100.0

    def test_score_is_deterministic(self):
        answers = [{"question_id": "q2", "text_answer": "Long enough scenario answer here."}]
        first = score_attempt([MCQ, SCENARIO, CODING], answers)
        assert all(score_attempt([MCQ, SCENARIO, CODING], answers) == first for _ in range(5))

    def test_rounds_to_two_decimals(self):
        questions = [{"id": f"q{i}", "question_type": "mcq", "correct_option_id": "a"} for i in range(7)]
        answers = [{"question_id": "q0", "selected_option_id": "a"}]
        assert score_attempt(questions, answers) == 14.29


def test_breakdown_lists_every_question_in_catalog_order():
    rows = score_breakdown([MCQ, SCENARIO], [{"question_id": "q2", "text_answer": "n" * 25}])
    assert [r["question_id"] for r in rows] == ["q1", "q2"]
    assert rows[0] == {"question_id": "q1", "question_type": "mcq", "answered": False, "points": 0.0}
    assert rows[1]["points"] == 0.5


def test_malformed_answer_rows_are_skipped():
    indexed = scoring_service._answers_by_question([None, "junk", {"selected_option_id": "b"}])
    assert indexed == {}
