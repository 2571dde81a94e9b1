"""
models/exam_identity.py

시험 식별자 모델 (과목, 연도, 시험 종류).
세션이 시작되면 변경되지 않으며, 모든 외부 리소스 경로와 저장 키가 여기서 파생된다.
"""

import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from civil_exam_cbt.errors import ExamNavigationError


class Subject(str, Enum):
    KOREAN = "korean"
    ENGLISH = "english"
    HISTORY = "history"
    ADMINLAW = "adminlaw"
    EDUCATION = "education"

    @property
    def display_name(self) -> str:
        return _SUBJECT_NAMES[self]


class ExamType(str, Enum):
    NATIONAL = "national"
    LOCAL = "local"

    @property
    def display_name(self) -> str:
        return _EXAM_TYPE_NAMES[self]


_SUBJECT_NAMES = {
    Subject.KOREAN: "국어",
    Subject.ENGLISH: "영어",
    Subject.HISTORY: "한국사",
    Subject.ADMINLAW: "행정법",
    Subject.EDUCATION: "교육학개론",
}

_EXAM_TYPE_NAMES = {
    ExamType.NATIONAL: "국가직",
    ExamType.LOCAL: "지방직",
}


class ExamIdentity(BaseModel):
    """
    하나의 시험 세션을 유일하게 식별하는 (과목, 연도, 시험 종류) 조합.

    Attributes:
        subject:   과목 키 (예: korean)
        year:      시행 연도
        exam_type: 국가직(national) / 지방직(local)
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    subject: Subject = Field(..., description="과목 키")
    year: int = Field(..., ge=1900, le=2100, description="시행 연도")
    exam_type: ExamType = Field(
        default=ExamType.NATIONAL,
        alias="type",
        description="시험 종류 (기본값: 국가직)",
    )

    @classmethod
    def from_params(
        cls,
        subject: Optional[str],
        year: Optional[object],
        exam_type: Optional[str] = None,
    ) -> "ExamIdentity":
        """
        요청 파라미터 → ExamIdentity.

        subject 또는 year가 없거나 해석할 수 없으면 ExamNavigationError.
        exam_type이 비어 있으면 국가직으로 간주한다.
        """
        if not subject or year in (None, ""):
            raise ExamNavigationError("잘못된 접근입니다. 과목과 연도가 필요합니다.")
        try:
            return cls(
                subject=subject,
                year=int(year),
                exam_type=exam_type or ExamType.NATIONAL,
            )
        except (TypeError, ValueError) as e:
            raise ExamNavigationError(f"잘못된 시험 정보입니다: {e}") from e

    @property
    def file_stem(self) -> str:
        return f"{self.year}_{self.exam_type.value}"

    @property
    def progress_key(self) -> str:
        return f"exam_progress_{self.subject.value}_{self.year}_{self.exam_type.value}"

    @property
    def title(self) -> str:
        return f"{self.year}년 {self.exam_type.display_name} {self.subject.display_name}"

    def document_path(self, data_dir: str) -> str:
        return os.path.join(data_dir, self.subject.value, f"{self.file_stem}.pdf")

    def answer_path(self, data_dir: str) -> str:
        return os.path.join(data_dir, self.subject.value, f"{self.file_stem}_answers.json")
