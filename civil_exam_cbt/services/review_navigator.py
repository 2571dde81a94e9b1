"""
services/review_navigator.py

결과 화면의 문항 리뷰 필터 + 상세 보기 이동.

currentIndex는 항상 "필터가 적용된 목록" 기준이다.
현재 필터에 없는 문항을 선택하면 필터를 'all'로 바꾼 뒤 선택한다.
"""

from enum import Enum
from typing import Dict, List, Optional

from civil_exam_cbt.models.score_report import QuestionResult, ScoreReport
from civil_exam_cbt.services.exam_service import status_counts


class ReviewFilter(str, Enum):
    ALL = "all"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    UNANSWERED = "unanswered"


class ReviewNavigator:
    def __init__(self, report: ScoreReport, review_filter: ReviewFilter = ReviewFilter.ALL) -> None:
        self.report = report
        self.filter = ReviewFilter(review_filter)
        self.current_index = 0
        self._visible = self._apply_filter()

    def _apply_filter(self) -> List[QuestionResult]:
        if self.filter is ReviewFilter.ALL:
            return list(self.report.per_question)
        return [q for q in self.report.per_question if q.status.value == self.filter.value]

    @property
    def visible(self) -> List[QuestionResult]:
        return list(self._visible)

    @property
    def current(self) -> Optional[QuestionResult]:
        if not self._visible:
            return None
        return self._visible[self.current_index]

    def set_filter(self, review_filter: ReviewFilter) -> None:
        self.filter = ReviewFilter(review_filter)
        self._visible = self._apply_filter()
        self.current_index = 0

    @property
    def has_prev(self) -> bool:
        return self.current_index > 0

    @property
    def has_next(self) -> bool:
        return self.current_index < len(self._visible) - 1

    def next(self) -> bool:
        if not self.has_next:
            return False
        self.current_index += 1
        return True

    def prev(self) -> bool:
        if not self.has_prev:
            return False
        self.current_index -= 1
        return True

    def select(self, number: int) -> QuestionResult:
        """
        문항 번호로 상세 보기 이동.

        현재 필터 목록에 있으면 그 위치로 이동하고, 없으면 필터를 'all'로 바꾼 뒤 이동한다.
        존재하지 않는 문항 번호면 ValueError (상태 변경 없음).
        """
        if not 1 <= number <= self.report.total_questions:
            raise ValueError(f"존재하지 않는 문항입니다: {number}번")

        for idx, q in enumerate(self._visible):
            if q.number == number:
                self.current_index = idx
                return q

        self.set_filter(ReviewFilter.ALL)
        # 'all' 목록은 문항 번호 순이므로 index = number - 1
        self.current_index = number - 1
        return self._visible[self.current_index]

    def counts(self) -> Dict[str, int]:
        return dict(status_counts(self.report))

    def to_dict(self) -> dict:
        current = self.current
        return {
            "filter": self.filter.value,
            "current_index": self.current_index,
            "current": current.model_dump(mode="json") if current else None,
            "has_prev": self.has_prev,
            "has_next": self.has_next,
            "visible": [q.model_dump(mode="json") for q in self._visible],
            "counts": self.counts(),
        }
