"""
services/document_viewport.py

시험지 뷰어의 페이지/배율 커서.
실제 렌더링은 PagedDocument에 (페이지 번호, 배율)만 넘겨 위임한다.
"""

from typing import Optional, Sequence

import config
from civil_exam_cbt.services.pdf_document import PagedDocument


class DocumentViewport:
    def __init__(
        self,
        document: Optional[PagedDocument] = None,
        zoom_levels: Sequence[float] = config.ZOOM_LEVELS,
        default_zoom: float = config.DEFAULT_ZOOM,
    ) -> None:
        self.zoom_levels = list(zoom_levels)
        self.default_zoom = default_zoom
        self.zoom = default_zoom
        self.current_page = 1
        self.document: Optional[PagedDocument] = None
        self.total_pages = 1
        if document is not None:
            self.attach(document)

    def attach(self, document: PagedDocument) -> None:
        self.document = document
        self.total_pages = max(1, document.page_count)
        self.current_page = 1

    def detach(self) -> None:
        if self.document is not None:
            self.document.close()
        self.document = None
        self.total_pages = 1
        self.current_page = 1

    @property
    def has_document(self) -> bool:
        return self.document is not None

    # ── 페이지 ──────────────────────────────────────────────────────────────

    def go_to_page(self, page: int) -> int:
        # 범위를 벗어나면 조용히 보정
        self.current_page = max(1, min(page, self.total_pages))
        return self.current_page

    def next_page(self) -> int:
        return self.go_to_page(self.current_page + 1)

    def prev_page(self) -> int:
        return self.go_to_page(self.current_page - 1)

    @property
    def has_prev_page(self) -> bool:
        return self.current_page > 1

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    # ── 배율 ────────────────────────────────────────────────────────────────

    def _closest_zoom_index(self, zoom: float) -> int:
        return min(
            range(len(self.zoom_levels)),
            key=lambda i: abs(self.zoom_levels[i] - zoom),
        )

    def set_zoom(self, level: float) -> float:
        """임의의 값을 가장 가까운 배율 단계로 맞춘다."""
        self.zoom = self.zoom_levels[self._closest_zoom_index(level)]
        return self.zoom

    def zoom_in(self) -> float:
        idx = self._closest_zoom_index(self.zoom)
        if idx < len(self.zoom_levels) - 1:
            self.zoom = self.zoom_levels[idx + 1]
        return self.zoom

    def zoom_out(self) -> float:
        idx = self._closest_zoom_index(self.zoom)
        if idx > 0:
            self.zoom = self.zoom_levels[idx - 1]
        return self.zoom

    def zoom_reset(self) -> float:
        self.zoom = self.default_zoom
        return self.zoom

    @property
    def can_zoom_in(self) -> bool:
        return self._closest_zoom_index(self.zoom) < len(self.zoom_levels) - 1

    @property
    def can_zoom_out(self) -> bool:
        return self._closest_zoom_index(self.zoom) > 0

    @property
    def zoom_percent(self) -> str:
        return f"{round(self.zoom * 100)}%"

    # ── 렌더링 ──────────────────────────────────────────────────────────────

    def render(self) -> Optional[bytes]:
        """현재 페이지/배율로 렌더링. 시험지가 없으면 None."""
        document = self.document
        if document is None:
            return None
        return document.render_page(self.current_page, self.zoom)

    def to_dict(self) -> dict:
        return {
            "has_document": self.has_document,
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "zoom": self.zoom,
            "zoom_percent": self.zoom_percent,
            "has_prev_page": self.has_prev_page,
            "has_next_page": self.has_next_page,
            "can_zoom_in": self.can_zoom_in,
            "can_zoom_out": self.can_zoom_out,
        }
