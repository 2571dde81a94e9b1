"""
services/answer_store.py

문항 번호 → 선택한 보기 번호 매핑 (OMR 답안지).
같은 보기를 다시 누르면 선택이 해제된다 (토글). 문항당 하나의 보기만 선택 가능.
저장·화면 갱신은 호출자(ExamSession)의 책임.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional


class AnswerStore:
    def __init__(self) -> None:
        self._answers: Dict[int, int] = {}

    def select(self, question: int, option: int) -> Optional[int]:
        """
        보기 선택.

        이미 같은 보기가 선택되어 있으면 해제하고, 아니면 새 보기로 교체한다.

        Returns:
            변경 후 해당 문항의 선택값 (해제되었으면 None)
        """
        if self._answers.get(question) == option:
            del self._answers[question]
            return None
        self._answers[question] = option
        return option

    def get(self, question: int) -> Optional[int]:
        return self._answers.get(question)

    def reset(self) -> None:
        self._answers.clear()

    def load(self, answers: Mapping[int, int]) -> None:
        """저장된 답안으로 전체 교체 (복원용)."""
        self._answers = dict(answers)

    def snapshot(self) -> Mapping[int, int]:
        return MappingProxyType(dict(self._answers))

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    def __contains__(self, question: int) -> bool:
        return question in self._answers
