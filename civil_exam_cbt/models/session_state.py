"""
models/session_state.py

시험 진행 상태를 저장·전달하기 위한 모델.
Pydantic BaseModel 기반 — 직렬화/역직렬화 및 타입 안전성 확보.
UI 코드 없음.

- AnswerKey       : 정답 파일 ({examInfo: {totalQuestions}, answers: [...]})
- SessionProgress : 풀이 중 답안 저장 단위 (새로고침 복원용)
- ExamResult      : 제출 시 결과 화면으로 한 번만 넘기는 데이터
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

import config


class ExamInfo(BaseModel):
    total_questions: Optional[int] = Field(None, alias="totalQuestions", ge=0)


class AnswerKey(BaseModel):
    """
    정답 파일 모델.

    examInfo.totalQuestions가 없으면 answers 길이, 그마저 비어 있으면
    기본 문항 수(config.DEFAULT_QUESTIONS)를 사용한다.
    """

    model_config = ConfigDict(populate_by_name=True)

    exam_info: ExamInfo = Field(default_factory=ExamInfo, alias="examInfo")
    answers: List[Optional[int]] = Field(
        default_factory=list,
        description="정답 목록 (index 0 = 1번). null은 정답 미기재",
    )

    @property
    def total_questions(self) -> int:
        return (
            self.exam_info.total_questions
            or len(self.answers)
            or config.DEFAULT_QUESTIONS
        )

    @classmethod
    def fallback(cls) -> "AnswerKey":
        return cls(exam_info=ExamInfo(totalQuestions=config.DEFAULT_QUESTIONS), answers=[])


class SessionProgress(BaseModel):
    """
    풀이 중인 답안 + 경과 시간.

    Attributes:
        answers:         {문항 번호: 선택한 보기 번호}. 응답한 문항만 키로 존재.
        elapsed_seconds: 저장 시점까지의 경과 시간 (초)
        timestamp:       저장 시각 (epoch milliseconds)
    """

    model_config = ConfigDict(populate_by_name=True)

    answers: Dict[int, int] = Field(default_factory=dict)
    elapsed_seconds: int = Field(default=0, ge=0, alias="elapsedSeconds")
    timestamp: int = Field(..., description="저장 시각 (epoch ms)")


class ExamResult(BaseModel):
    """
    시험 화면 → 결과 화면 전달 데이터. 한 번만 소비된다.
    """

    model_config = ConfigDict(populate_by_name=True)

    subject: str
    year: int
    type: str
    total_questions: int = Field(..., gt=0, alias="totalQuestions")
    answers: Dict[int, int] = Field(default_factory=dict)
    correct_answers: List[Optional[int]] = Field(default_factory=list, alias="correctAnswers")
    elapsed_seconds: int = Field(default=0, ge=0, alias="elapsedSeconds")
    submitted_at: datetime = Field(..., alias="submittedAt")

    @field_validator("answers")
    @classmethod
    def validate_answer_options(cls, v: Dict[int, int]) -> Dict[int, int]:
        for question, option in v.items():
            if not 1 <= option <= config.OPTION_COUNT:
                raise ValueError(f"{question}번 문항의 선택지({option})가 범위를 벗어났습니다.")
        return v
