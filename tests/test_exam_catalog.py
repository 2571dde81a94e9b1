import pytest

from civil_exam_cbt.errors import AnswerSourceError
from civil_exam_cbt.models.exam_identity import ExamIdentity, Subject
from civil_exam_cbt.services.answer_source import load_answer_key
from civil_exam_cbt.services.exam_catalog import (
    count_available_exams, exam_exists, scan_available_exams,
)
from conftest import write_answers, write_pdf


def test_load_answer_key(data_dir, identity):
    key = load_answer_key(data_dir, identity)
    assert key.total_questions == 20
    assert len(key.answers) == 20


def test_load_answer_key_missing(tmp_path, identity):
    with pytest.raises(AnswerSourceError):
        load_answer_key(str(tmp_path), identity)


def test_load_answer_key_bad_json(tmp_path, identity):
    path = tmp_path / "korean"
    path.mkdir()
    (path / "2024_national_answers.json").write_text("{oops", encoding="utf-8")
    with pytest.raises(AnswerSourceError):
        load_answer_key(str(tmp_path), identity)


def test_load_answer_key_bad_schema(tmp_path, identity):
    path = tmp_path / "korean"
    path.mkdir()
    (path / "2024_national_answers.json").write_text('{"answers": "1234"}', encoding="utf-8")
    with pytest.raises(AnswerSourceError):
        load_answer_key(str(tmp_path), identity)


def test_load_answer_key_with_missing_entry(tmp_path, identity):
    path = tmp_path / "korean"
    path.mkdir()
    (path / "2024_national_answers.json").write_text(
        '{"examInfo": {"totalQuestions": 3}, "answers": [1, null, 3]}', encoding="utf-8"
    )
    key = load_answer_key(str(tmp_path), identity)
    assert key.total_questions == 3
    assert key.answers == [1, None, 3]


def test_load_answer_key_zero_total_uses_answer_count(tmp_path, identity):
    path = tmp_path / "korean"
    path.mkdir()
    write_answers(path / "2024_national_answers.json", [1, 2, 3, 4, 1], total=0)
    key = load_answer_key(str(tmp_path), identity)
    assert key.total_questions == 5


def test_exam_exists_requires_pdf_and_answers(tmp_path):
    subject_dir = tmp_path / "english"
    subject_dir.mkdir()
    identity = ExamIdentity(subject="english", year=2021, exam_type="local")

    write_pdf(subject_dir / "2021_local.pdf", pages=1)
    assert exam_exists(str(tmp_path), identity) is False

    write_answers(subject_dir / "2021_local_answers.json", [1, 2])
    assert exam_exists(str(tmp_path), identity) is True


def test_scan_available_exams(data_dir):
    available = scan_available_exams(data_dir, Subject.KOREAN)
    assert [(i.year, i.exam_type.value) for i in available] == [(2024, "national")]
    assert scan_available_exams(data_dir, Subject.HISTORY) == []


def test_count_available_exams(data_dir):
    counts = count_available_exams(data_dir)
    assert counts["korean"] == 1
    assert counts["education"] == 0
    assert set(counts) == {s.value for s in Subject}
