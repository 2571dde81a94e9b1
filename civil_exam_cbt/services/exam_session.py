"""
services/exam_session.py

시험 세션 오케스트레이터.

상태: INITIALIZING → ACTIVE → SUBMITTED (되돌릴 수 없음)

start():
  1. 정답 파일 로드 (실패 시 기본 20문항, 정답 없음으로 계속)
  2. 저장된 답안이 있으면 confirm_restore 콜백으로 복원 여부 확인
  3. 시험지 PDF 열기 (실패 시 PDF 없이 계속)
  4. 타이머 시작 (복원한 경우 이전 경과 시간부터)

select(): 답안 변경 → 저장 → on_change 콜백 순서로 처리.
submit(): 타이머 정지 → 저장 답안 삭제 → ExamResult 생성.
"""

import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, List, Optional

import config
from civil_exam_cbt.errors import AnswerSourceError, DocumentUnavailableError, SessionStateError
from civil_exam_cbt.models.exam_identity import ExamIdentity
from civil_exam_cbt.models.session_state import AnswerKey, ExamResult, SessionProgress
from civil_exam_cbt.services.answer_source import load_answer_key
from civil_exam_cbt.services.answer_store import AnswerStore
from civil_exam_cbt.services.document_viewport import DocumentViewport
from civil_exam_cbt.services.pdf_document import PagedDocument, open_document
from civil_exam_cbt.services.persistence import ProgressStore
from civil_exam_cbt.services.timer import ExamTimer

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[SessionProgress], bool]


class SessionPhase(str, Enum):
    INITIALIZING = "initializing"
    ACTIVE = "active"
    SUBMITTED = "submitted"


def _decline(progress: SessionProgress) -> bool:
    return False


class ExamSession:
    """
    하나의 시험 (과목, 연도, 시험 종류)에 대한 풀이 세션.

    Args:
        identity:        시험 식별자
        progress_store:  풀이 중 답안 저장소
        data_dir:        정답 파일 / 시험지 PDF 루트 디렉토리
        answer_loader:   (data_dir, identity) → AnswerKey
        document_opener: path → PagedDocument
        clock:           현재 시각 (초). 테스트에서 교체.
        on_change:       답안이 바뀔 때마다 호출 (화면 갱신용)
    """

    def __init__(
        self,
        identity: ExamIdentity,
        progress_store: ProgressStore,
        data_dir: str = config.DATA_DIR,
        answer_loader: Callable[[str, ExamIdentity], AnswerKey] = load_answer_key,
        document_opener: Callable[[str], PagedDocument] = open_document,
        clock: Callable[[], float] = time.time,
        on_change: Optional[Callable[["ExamSession"], None]] = None,
    ) -> None:
        self.identity = identity
        self.progress_store = progress_store
        self.data_dir = data_dir
        self.answer_loader = answer_loader
        self.document_opener = document_opener
        self.clock = clock
        self.on_change = on_change

        self.phase = SessionPhase.INITIALIZING
        self.answers = AnswerStore()
        self.timer = ExamTimer(clock)
        self.viewport = DocumentViewport()
        self.total_questions = config.DEFAULT_QUESTIONS
        self.correct_answers: List[Optional[int]] = []
        self.degraded_answers = False
        self.document_missing = False
        self.restored = False

    # ── 초기화 ──────────────────────────────────────────────────────────────

    def start(self, confirm_restore: ConfirmCallback = _decline) -> None:
        if self.phase is not SessionPhase.INITIALIZING:
            raise SessionStateError(f"이미 시작된 세션입니다 ({self.phase.value}).")

        self._load_answer_key()
        restored_elapsed = self._restore_progress(confirm_restore)
        self._load_document()

        self.timer.start()
        if restored_elapsed is not None:
            self.timer.resume_from(restored_elapsed)

        self.phase = SessionPhase.ACTIVE
        logger.info(
            f"시험 시작: {self.identity.title} ({self.total_questions}문항, "
            f"복원={'예' if self.restored else '아니오'})"
        )

    def _load_answer_key(self) -> None:
        try:
            key = self.answer_loader(self.data_dir, self.identity)
        except AnswerSourceError as e:
            logger.warning(f"정답 파일 로드 실패, 기본 {config.DEFAULT_QUESTIONS}문항으로 설정: {e}")
            key = AnswerKey.fallback()
            self.degraded_answers = True
        self.total_questions = key.total_questions
        self.correct_answers = list(key.answers)

    def _restore_progress(self, confirm_restore: ConfirmCallback) -> Optional[int]:
        progress = self.progress_store.load(self.identity)
        if progress is None or not progress.answers:
            return None

        if not confirm_restore(progress):
            logger.info(f"저장된 답안 복원 거절: {self.identity.progress_key}")
            self.progress_store.clear(self.identity)
            return None

        valid = self._valid_answers(progress.answers)
        if len(valid) != len(progress.answers):
            logger.warning(
                f"범위를 벗어난 저장 답안 {len(progress.answers) - len(valid)}개를 제외했습니다."
            )
        self.answers.load(valid)
        self.restored = True
        logger.info(f"이전 답안 복원: {len(valid)}문항, {progress.elapsed_seconds}초")
        return progress.elapsed_seconds

    def _valid_answers(self, answers: Dict[int, int]) -> Dict[int, int]:
        return {
            q: opt
            for q, opt in answers.items()
            if 1 <= q <= self.total_questions and 1 <= opt <= config.OPTION_COUNT
        }

    def _load_document(self) -> None:
        path = self.identity.document_path(self.data_dir)
        try:
            self.viewport.attach(self.document_opener(path))
        except DocumentUnavailableError as e:
            logger.warning(f"시험지 PDF 없이 진행합니다: {e}")
            self.document_missing = True

    # ── 답안 ────────────────────────────────────────────────────────────────

    def _require_active(self) -> None:
        if self.phase is not SessionPhase.ACTIVE:
            raise SessionStateError(f"진행 중인 시험이 아닙니다 ({self.phase.value}).")

    def select(self, question: int, option: int) -> Optional[int]:
        """
        보기 선택/해제. 변경 후 해당 문항의 선택값을 반환한다 (해제 시 None).
        """
        self._require_active()
        if not 1 <= question <= self.total_questions:
            raise ValueError(f"문항 번호가 범위를 벗어났습니다: {question}")
        if not 1 <= option <= config.OPTION_COUNT:
            raise ValueError(f"보기 번호가 범위를 벗어났습니다: {option}")

        selected = self.answers.select(question, option)
        self.save_progress()
        self._notify()
        return selected

    def reset_answers(self, confirm: Callable[[], bool]) -> bool:
        """모든 답안 초기화. confirm()이 False면 아무것도 하지 않는다."""
        self._require_active()
        if not confirm():
            return False
        self.answers.reset()
        self.progress_store.clear(self.identity)
        self._notify()
        logger.info(f"답안 초기화: {self.identity.progress_key}")
        return True

    def save_progress(self) -> None:
        progress = self.progress_store.make_progress(
            self.answers.snapshot(), self.timer.elapsed_seconds()
        )
        self.progress_store.save(self.identity, progress)

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    # ── 제출 / 종료 ─────────────────────────────────────────────────────────

    def submit(self) -> ExamResult:
        self._require_active()
        self.timer.stop()
        self.progress_store.clear(self.identity)

        result = ExamResult(
            subject=self.identity.subject.value,
            year=self.identity.year,
            type=self.identity.exam_type.value,
            total_questions=self.total_questions,
            answers=dict(self.answers.snapshot()),
            correct_answers=list(self.correct_answers),
            elapsed_seconds=self.timer.elapsed_seconds(),
            submitted_at=datetime.fromtimestamp(self.clock(), tz=timezone.utc),
        )
        self.phase = SessionPhase.SUBMITTED
        self.viewport.detach()
        logger.info(
            f"시험 제출: {self.identity.title} "
            f"({self.answered_count}/{self.total_questions}문항 응답, {result.elapsed_seconds}초)"
        )
        return result

    def close(self) -> None:
        """세션 정리 (타이머 정지, PDF 닫기). 여러 번 호출해도 안전."""
        self.timer.stop()
        self.viewport.detach()

    # ── 조회 ────────────────────────────────────────────────────────────────

    @property
    def answered_count(self) -> int:
        return self.answers.answered_count

    @property
    def unanswered_count(self) -> int:
        return self.total_questions - self.answered_count

    @property
    def progress_percent(self) -> float:
        return round(self.answered_count / self.total_questions * 100, 1)

    @property
    def elapsed_seconds(self) -> int:
        return self.timer.elapsed_seconds()

    def to_dict(self) -> dict:
        return {
            "subject": self.identity.subject.value,
            "year": self.identity.year,
            "type": self.identity.exam_type.value,
            "title": self.identity.title,
            "phase": self.phase.value,
            "total_questions": self.total_questions,
            "answers": {str(k): v for k, v in self.answers.snapshot().items()},
            "answered_count": self.answered_count,
            "unanswered_count": self.unanswered_count,
            "progress_percent": self.progress_percent,
            "elapsed_seconds": self.elapsed_seconds,
            "restored": self.restored,
            "degraded_answers": self.degraded_answers,
            "document_missing": self.document_missing,
            "viewport": self.viewport.to_dict(),
        }
