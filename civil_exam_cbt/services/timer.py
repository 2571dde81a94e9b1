"""
services/timer.py

경과 시간 타이머.
경과 시간은 매번 (현재 시각 - 시작 시각)으로 다시 계산한다. 누적하지 않으므로
탭이 멈춰 있던 시간도 그대로 반영된다.
"""

import time
from typing import Callable, Optional


class ExamTimer:
    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self.clock = clock
        self.start_time: Optional[float] = None
        self._final: Optional[int] = None

    def start(self) -> None:
        self.start_time = self.clock()
        self._final = None

    def resume_from(self, elapsed_seconds: int) -> None:
        """이전 경과 시간에서 이어서 측정 (저장된 답안 복원 시)."""
        self.start_time = self.clock() - elapsed_seconds
        self._final = None

    def elapsed_seconds(self) -> int:
        if self._final is not None:
            return self._final
        if self.start_time is None:
            return 0
        return max(0, int(self.clock() - self.start_time))

    def stop(self) -> None:
        # 두 번째 호출부터는 아무 일도 하지 않는다
        if self._final is None:
            self._final = self.elapsed_seconds()

    @property
    def is_running(self) -> bool:
        return self.start_time is not None and self._final is None


def format_time(seconds: int) -> str:
    """시험 화면 표시용: HH:MM:SS"""
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def format_duration(seconds: int) -> str:
    """결과 화면 표시용: 1시간 2분 3초 / 2분 3초 / 3초"""
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    if h > 0:
        return f"{h}시간 {m}분 {s}초"
    if m > 0:
        return f"{m}분 {s}초"
    return f"{s}초"
