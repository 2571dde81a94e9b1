"""
models/score_report.py

채점 결과 모델. 생성 후 변경하지 않는다 (필요하면 다시 계산).
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QuestionStatus(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    UNANSWERED = "unanswered"


class GradeBand(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_score: int = Field(..., ge=0, le=100)
    key: str
    label: str


class QuestionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1)
    user_answer: Optional[int] = None
    correct_answer: Optional[int] = None
    status: QuestionStatus


class ScoreReport(BaseModel):
    """
    제출된 시험의 채점 결과.

    Attributes:
        correct / incorrect / unanswered: 상태별 문항 수 (합계 = total_questions)
        score:        100점 만점 환산 점수 (정수, 반올림)
        grade:        점수에 해당하는 등급
        per_question: 문항 번호 순 채점 결과
    """

    model_config = ConfigDict(frozen=True)

    total_questions: int = Field(..., ge=0)
    correct: int = Field(..., ge=0)
    incorrect: int = Field(..., ge=0)
    unanswered: int = Field(..., ge=0)
    score: int = Field(..., ge=0, le=100)
    grade: GradeBand
    per_question: List[QuestionResult] = Field(default_factory=list)
    elapsed_seconds: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def validate_counts(self) -> "ScoreReport":
        if self.correct + self.incorrect + self.unanswered != self.total_questions:
            raise ValueError("정답/오답/미응답 합계가 전체 문항 수와 일치하지 않습니다.")
        return self
