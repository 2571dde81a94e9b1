"""
services/exam_catalog.py

응시 가능한 시험 목록 (PDF + 정답 파일이 모두 있는 시험).
"""

import os
from typing import Dict, List

import config
from civil_exam_cbt.models.exam_identity import ExamIdentity, ExamType, Subject


def exam_exists(data_dir: str, identity: ExamIdentity) -> bool:
    return os.path.isfile(identity.document_path(data_dir)) and os.path.isfile(
        identity.answer_path(data_dir)
    )


def scan_available_exams(data_dir: str, subject: Subject) -> List[ExamIdentity]:
    """설정된 모든 연도 × 시험 종류를 확인. 최신 연도 순."""
    available = []
    for year in config.EXAM_YEARS:
        for exam_type in ExamType:
            identity = ExamIdentity(subject=subject, year=year, exam_type=exam_type)
            if exam_exists(data_dir, identity):
                available.append(identity)
    return available


def count_available_exams(data_dir: str) -> Dict[str, int]:
    return {s.value: len(scan_available_exams(data_dir, s)) for s in Subject}
