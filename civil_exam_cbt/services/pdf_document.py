"""
services/pdf_document.py

시험지 PDF 렌더러 (PyMuPDF).
Public API:
  - open_document(path) -> PdfDocument
  - PdfDocument.page_count
  - PdfDocument.render_page(page_number, zoom) -> bytes (PNG)
"""

import logging
import os
import threading
from typing import Protocol

import fitz  # PyMuPDF

from civil_exam_cbt.errors import DocumentUnavailableError

logger = logging.getLogger(__name__)


class PagedDocument(Protocol):
    page_count: int

    def render_page(self, page_number: int, zoom: float) -> bytes: ...

    def close(self) -> None: ...


class PdfDocument:
    def __init__(self, doc: "fitz.Document", path: str = "") -> None:
        self._doc = doc
        self.path = path
        self.page_count = len(doc)
        # 렌더링은 워커 스레드에서, close()는 제출 요청에서 호출된다
        self._lock = threading.Lock()

    def render_page(self, page_number: int, zoom: float) -> bytes:
        """
        페이지 1개를 PNG로 렌더링.

        Args:
            page_number: 1-based 페이지 번호
            zoom:        배율 (1.0 = 72dpi 원본 크기)

        이미 닫힌 문서면 DocumentUnavailableError.
        """
        if not 1 <= page_number <= self.page_count:
            raise ValueError(f"페이지 번호가 범위를 벗어났습니다: {page_number}/{self.page_count}")
        with self._lock:
            if self._doc is None:
                raise DocumentUnavailableError(f"이미 닫힌 PDF입니다: {self.path}")
            page = self._doc.load_page(page_number - 1)
            pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom))
            return pix.tobytes("png")

    def close(self) -> None:
        with self._lock:
            if self._doc is not None:
                self._doc.close()
                self._doc = None


def open_document(path: str) -> PdfDocument:
    """PDF 파일 열기. 파일이 없거나 열 수 없으면 DocumentUnavailableError."""
    if not os.path.exists(path):
        raise DocumentUnavailableError(f"PDF 파일을 찾을 수 없습니다: {path}")
    try:
        doc = fitz.open(path)
    except Exception as e:
        logger.error(f"PDF 열기 실패 - {path}: {e}")
        raise DocumentUnavailableError(f"PDF 파일을 열 수 없습니다: {path}") from e

    if len(doc) == 0:
        doc.close()
        raise DocumentUnavailableError(f"PDF 페이지가 없습니다: {path}")

    logger.info(f"PDF 로드 완료: {path} ({len(doc)}페이지)")
    return PdfDocument(doc, path)
