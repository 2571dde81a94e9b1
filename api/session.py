"""
api/session.py — 브라우저별 인메모리 세션 (쿠키 기반)

각 브라우저에 UUID 세션 ID를 발급하고, 세션별로 독립된 상태를 유지.
  - exam    : 진행 중인 ExamSession (없으면 None)
  - handoff : 제출 결과 1회성 전달 저장소 (결과 화면에서 한 번만 꺼냄)
  - review  : 결과 화면 ReviewNavigator
TTL(기본 1시간) 경과 시 자동 만료.
"""

import threading
import time
import uuid
from typing import Any

import config
from civil_exam_cbt.services.persistence import ResultHandoff
from civil_exam_cbt.services.storage import MemoryStorage

_lock = threading.Lock()
_sessions: dict[str, dict[str, Any]] = {}
_timestamps: dict[str, float] = {}

SESSION_TTL = config.SESSION_TTL


def _new_state() -> dict[str, Any]:
    return {
        "exam": None,
        "handoff": ResultHandoff(MemoryStorage()),
        "review": None,
        "result": None,
    }


def _close_exam(state: dict[str, Any]) -> None:
    exam = state.get("exam")
    if exam is not None:
        exam.close()


def create_session() -> str:
    """새 세션을 생성하고 세션 ID를 반환."""
    sid = uuid.uuid4().hex
    with _lock:
        _sessions[sid] = _new_state()
        _timestamps[sid] = time.time()
    return sid


def get_session(sid: str) -> dict[str, Any] | None:
    """세션 ID로 세션 데이터를 가져옴. 만료되었거나 없으면 None."""
    with _lock:
        if sid not in _sessions:
            return None
        if time.time() - _timestamps[sid] > SESSION_TTL:
            _close_exam(_sessions.pop(sid))
            del _timestamps[sid]
            return None
        _timestamps[sid] = time.time()  # 접근 시 갱신
        return _sessions[sid]


def get(sid: str, key: str, default=None):
    """세션에서 값 읽기."""
    session = get_session(sid)
    if session is None:
        return default
    return session.get(key, default)


def put(sid: str, key: str, value) -> None:
    """세션에 값 쓰기."""
    with _lock:
        if sid in _sessions:
            _sessions[sid][key] = value
            _timestamps[sid] = time.time()


def reset(sid: str) -> None:
    """세션 초기화 (진행 중인 시험은 정리)."""
    with _lock:
        if sid in _sessions:
            _close_exam(_sessions[sid])
            _sessions[sid] = _new_state()
            _timestamps[sid] = time.time()


def cleanup_expired() -> int:
    """만료된 세션을 정리. 제거된 수 반환."""
    now = time.time()
    removed = 0
    with _lock:
        expired = [sid for sid, ts in _timestamps.items() if now - ts > SESSION_TTL]
        for sid in expired:
            _close_exam(_sessions.pop(sid))
            del _timestamps[sid]
            removed += 1
    return removed
