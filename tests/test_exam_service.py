import random
from datetime import datetime, timezone

import pytest

from civil_exam_cbt.models.score_report import QuestionStatus
from civil_exam_cbt.models.session_state import ExamResult
from civil_exam_cbt.services.exam_service import (
    calculate_score, classify_answer, get_grade, score_exam, score_result,
)

KEY = [1, 2, 3, 4] * 5


def test_fifteen_of_twenty_scores_75_good():
    answers = {q: KEY[q - 1] for q in range(1, 16)}
    report = score_exam(answers, KEY, 20)
    assert report.correct == 15
    assert report.unanswered == 5
    assert report.score == 75
    assert report.grade.key == "good"
    assert report.grade.label == "합격 예상"


def test_perfect_score_is_excellent():
    answers = {q: KEY[q - 1] for q in range(1, 21)}
    report = score_exam(answers, KEY, 20)
    assert report.score == 100
    assert report.grade.key == "excellent"


def test_zero_score_is_poor():
    report = score_exam({}, KEY, 20)
    assert report.score == 0
    assert report.unanswered == 20
    assert report.grade.key == "poor"


@pytest.mark.parametrize("score,key", [
    (90, "excellent"), (89, "good"), (70, "good"), (69, "average"),
    (50, "average"), (49, "poor"), (0, "poor"),
])
def test_grade_band_thresholds(score, key):
    assert get_grade(score).key == key


def test_score_rounds_half_up():
    # 1/8 = 12.5점 → 13점
    assert calculate_score(1, 8) == 13
    # 1/3 = 33.33점 → 33점
    assert calculate_score(1, 3) == 33
    assert calculate_score(2, 3) == 67


def test_score_with_zero_questions():
    assert calculate_score(0, 0) == 0


def test_counts_always_sum_to_total():
    rng = random.Random(42)
    for _ in range(50):
        total = rng.randint(1, 40)
        key = [rng.randint(1, 4) for _ in range(rng.randint(0, total))]
        answers = {
            q: rng.randint(1, 4)
            for q in range(1, total + 1)
            if rng.random() < 0.7
        }
        report = score_exam(answers, key, total)
        assert report.correct + report.incorrect + report.unanswered == total
        assert len(report.per_question) == total


def test_short_answer_key_marks_answered_as_incorrect():
    report = score_exam({1: 1, 2: 2, 3: 3}, [1], 3)
    statuses = [q.status for q in report.per_question]
    assert statuses == [QuestionStatus.CORRECT, QuestionStatus.INCORRECT, QuestionStatus.INCORRECT]
    assert report.per_question[1].correct_answer is None


def test_short_answer_key_unanswered_stays_unanswered():
    report = score_exam({}, [1], 3)
    assert report.unanswered == 3


def test_answers_outside_range_are_ignored():
    report = score_exam({1: 1, 99: 2}, KEY, 20)
    assert report.correct == 1
    assert report.unanswered == 19


def test_per_question_is_ordered():
    report = score_exam({3: 3}, KEY, 5)
    assert [q.number for q in report.per_question] == [1, 2, 3, 4, 5]
    assert report.per_question[2].user_answer == 3


def test_classify_answer():
    assert classify_answer(None, 1) is QuestionStatus.UNANSWERED
    assert classify_answer(None, None) is QuestionStatus.UNANSWERED
    assert classify_answer(2, 2) is QuestionStatus.CORRECT
    assert classify_answer(2, 3) is QuestionStatus.INCORRECT
    assert classify_answer(2, None) is QuestionStatus.INCORRECT


def test_score_result_uses_handoff_fields():
    result = ExamResult(
        subject="korean",
        year=2024,
        type="national",
        total_questions=4,
        answers={1: 1, 2: 1},
        correct_answers=[1, 2, 3, 4],
        elapsed_seconds=321,
        submitted_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )
    report = score_result(result)
    assert (report.correct, report.incorrect, report.unanswered) == (1, 1, 2)
    assert report.score == 25
    assert report.elapsed_seconds == 321
