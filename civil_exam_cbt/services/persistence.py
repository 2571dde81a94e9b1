"""
services/persistence.py

풀이 중 답안 저장/복원 (ProgressStore)과 결과 화면 전달 (ResultHandoff).

ProgressStore 규칙:
- 키는 (과목, 연도, 시험 종류)로 결정. 같은 시험이면 항상 덮어쓴다.
- 저장 후 24시간이 지난 기록은 없는 것으로 취급하고 즉시 삭제한다.
- 읽을 수 없는 기록도 삭제 후 없는 것으로 취급한다.
"""

import logging
import time
from typing import Callable, Mapping, Optional

from pydantic import ValidationError

import config
from civil_exam_cbt.errors import ResultHandoffError
from civil_exam_cbt.models.exam_identity import ExamIdentity
from civil_exam_cbt.models.session_state import ExamResult, SessionProgress
from civil_exam_cbt.services.storage import StoragePort

logger = logging.getLogger(__name__)

RESULT_KEY = "examResult"


class ProgressStore:
    def __init__(
        self,
        storage: StoragePort,
        clock: Callable[[], float] = time.time,
        ttl_seconds: int = config.PROGRESS_TTL_SECONDS,
    ) -> None:
        self.storage = storage
        self.clock = clock
        self.ttl_seconds = ttl_seconds

    def now_ms(self) -> int:
        return int(self.clock() * 1000)

    def make_progress(self, answers: Mapping[int, int], elapsed_seconds: int) -> SessionProgress:
        """현재 시각 기준 SessionProgress 생성."""
        return SessionProgress(
            answers=dict(answers),
            elapsed_seconds=elapsed_seconds,
            timestamp=self.now_ms(),
        )

    def save(self, identity: ExamIdentity, progress: SessionProgress) -> None:
        self.storage.set(identity.progress_key, progress.model_dump_json(by_alias=True))

    def load(self, identity: ExamIdentity) -> Optional[SessionProgress]:
        key = identity.progress_key
        raw = self.storage.get(key)
        if raw is None:
            return None

        try:
            progress = SessionProgress.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"저장된 답안을 읽을 수 없어 삭제합니다 ({key}): {e}")
            self.storage.remove(key)
            return None

        if self.now_ms() - progress.timestamp > self.ttl_seconds * 1000:
            logger.info(f"24시간이 지난 저장 답안 삭제: {key}")
            self.storage.remove(key)
            return None

        return progress

    def clear(self, identity: ExamIdentity) -> None:
        self.storage.remove(identity.progress_key)


class ResultHandoff:
    """
    시험 화면 → 결과 화면 1회성 전달.
    take()는 저장된 결과를 꺼내면서 삭제한다.
    """

    def __init__(self, storage: StoragePort) -> None:
        self.storage = storage

    def put(self, result: ExamResult) -> None:
        self.storage.set(RESULT_KEY, result.model_dump_json(by_alias=True))

    def take(self) -> ExamResult:
        raw = self.storage.get(RESULT_KEY)
        if raw is None:
            raise ResultHandoffError("결과 데이터가 없습니다. 메인 페이지로 이동합니다.")
        self.storage.remove(RESULT_KEY)
        try:
            return ExamResult.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"결과 데이터 파싱 실패: {e}")
            raise ResultHandoffError("결과 데이터를 불러올 수 없습니다.") from e
