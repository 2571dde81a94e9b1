import json

import fitz
import pytest

from civil_exam_cbt.models.exam_identity import ExamIdentity
from civil_exam_cbt.services.persistence import ProgressStore
from civil_exam_cbt.services.storage import MemoryStorage


class FakeClock:
    """테스트용 시계. 호출하면 현재 시각(초)을 반환한다."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def write_pdf(path, pages: int = 3) -> None:
    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page()
        page.insert_text((72, 72), f"Page {i + 1}")
    doc.save(str(path))
    doc.close()


def write_answers(path, answers, total=None) -> None:
    data = {"answers": answers}
    if total is not None:
        data["examInfo"] = {"totalQuestions": total}
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def progress_store(storage, clock):
    return ProgressStore(storage, clock=clock)


@pytest.fixture
def identity():
    return ExamIdentity(subject="korean", year=2024, exam_type="national")


@pytest.fixture
def data_dir(tmp_path):
    """korean/2024_national 시험 (PDF 3페이지 + 정답 20문항)이 들어 있는 데이터 디렉토리."""
    root = tmp_path / "data"
    subject_dir = root / "korean"
    subject_dir.mkdir(parents=True)
    write_pdf(subject_dir / "2024_national.pdf", pages=3)
    write_answers(
        subject_dir / "2024_national_answers.json",
        [1, 2, 3, 4] * 5,
        total=20,
    )
    return str(root)
