"""
services/exam_service.py

시험 채점 및 등급 판정 비즈니스 로직.
순수 Python 함수로 구성 — UI 코드, 전역 상태 변경 없음.
"""

from typing import List, Mapping, Optional, Sequence, Tuple

import config
from civil_exam_cbt.models.score_report import (
    GradeBand,
    QuestionResult,
    QuestionStatus,
    ScoreReport,
)
from civil_exam_cbt.models.session_state import ExamResult

GRADE_BANDS: List[GradeBand] = [
    GradeBand(min_score=min_score, key=key, label=label)
    for min_score, key, label in config.GRADE_BANDS
]


def get_grade(score: int, bands: Sequence[GradeBand] = GRADE_BANDS) -> GradeBand:
    """
    점수에 해당하는 등급을 반환한다.
    최소 점수가 높은 등급부터 비교하여 처음 만족하는 등급을 사용한다.
    """
    for band in sorted(bands, key=lambda b: b.min_score, reverse=True):
        if score >= band.min_score:
            return band
    return min(bands, key=lambda b: b.min_score)


def calculate_score(correct: int, total_questions: int) -> int:
    """
    100점 만점 환산 점수 (정수, 0.5는 올림).
    total_questions가 0이면 0.
    """
    if total_questions <= 0:
        return 0
    # round-half-up을 정수 연산으로: floor(correct * 100 / total + 0.5)
    return (correct * 200 + total_questions) // (total_questions * 2)


def classify_answer(
    user_answer: Optional[int],
    correct_answer: Optional[int],
) -> QuestionStatus:
    """
    문항 1개 판정.

    - 응답 없음 → 미응답
    - 정답이 있고 일치 → 정답
    - 그 외 (정답 정보가 없는데 응답한 경우 포함) → 오답
    """
    if user_answer is None:
        return QuestionStatus.UNANSWERED
    if correct_answer is not None and user_answer == correct_answer:
        return QuestionStatus.CORRECT
    return QuestionStatus.INCORRECT


def score_exam(
    answers: Mapping[int, int],
    correct_answers: Sequence[Optional[int]],
    total_questions: int,
    elapsed_seconds: int = 0,
) -> ScoreReport:
    """
    사용자 답안을 채점하여 ScoreReport를 반환한다.

    Args:
        answers:         {문항 번호: 선택한 보기}. 응답한 문항만 포함.
        correct_answers: 정답 목록 (index 0 = 1번). 전체 문항 수보다 짧을 수 있다.
        total_questions: 전체 문항 수
        elapsed_seconds: 풀이 시간 (결과 표시용)
    """
    per_question: List[QuestionResult] = []
    counts = {status: 0 for status in QuestionStatus}

    for number in range(1, total_questions + 1):
        user_answer = answers.get(number)
        correct_answer = correct_answers[number - 1] if number <= len(correct_answers) else None
        status = classify_answer(user_answer, correct_answer)
        counts[status] += 1
        per_question.append(QuestionResult(
            number=number,
            user_answer=user_answer,
            correct_answer=correct_answer,
            status=status,
        ))

    score = calculate_score(counts[QuestionStatus.CORRECT], total_questions)

    return ScoreReport(
        total_questions=total_questions,
        correct=counts[QuestionStatus.CORRECT],
        incorrect=counts[QuestionStatus.INCORRECT],
        unanswered=counts[QuestionStatus.UNANSWERED],
        score=score,
        grade=get_grade(score),
        per_question=per_question,
        elapsed_seconds=elapsed_seconds,
    )


def score_result(result: ExamResult) -> ScoreReport:
    """제출 데이터(ExamResult) 채점."""
    return score_exam(
        result.answers,
        result.correct_answers,
        result.total_questions,
        result.elapsed_seconds,
    )


def status_counts(report: ScoreReport) -> List[Tuple[str, int]]:
    """필터 버튼 표시용 [(필터, 문항 수), ...]"""
    return [
        ("all", report.total_questions),
        (QuestionStatus.CORRECT.value, report.correct),
        (QuestionStatus.INCORRECT.value, report.incorrect),
        (QuestionStatus.UNANSWERED.value, report.unanswered),
    ]
