"""
main.py — 9급 공무원 CBT 실행 진입점

시작 순서:
  1. 로그 설정 (launch.log + 콘솔)
  2. 설정값 점검 (배율 단계, 등급 기준, 기본 문항 수). 잘못되면 종료
  3. DATA_DIR 점검: 과목별 응시 가능 시험 수, 짝이 맞지 않는 PDF/정답 파일 로그
  4. 서버가 뜨면 기본 브라우저로 접속, uvicorn은 메인 스레드에서 실행
"""

import logging
import os
import socket
import sys
import threading
import time
import webbrowser
from typing import Dict, List

import uvicorn

import config
from api.app import create_app
from civil_exam_cbt.models.exam_identity import ExamIdentity, ExamType, Subject
from civil_exam_cbt.services.exam_catalog import count_available_exams

logger = logging.getLogger(__name__)


def setup_logging(log_file: str = config.LOG_FILE) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    try:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    except OSError as e:
        # 로그 파일을 열 수 없으면 콘솔 출력만 사용
        print(f"로그 파일을 열 수 없습니다 ({log_file}): {e}", file=sys.stderr)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )


# ── 시작 점검 ───────────────────────────────────────────────────────────────

def check_config() -> List[str]:
    """설정값 점검. 문제 목록을 반환한다 (비어 있으면 정상)."""
    problems = []
    levels = config.ZOOM_LEVELS
    if not levels or any(level <= 0 for level in levels):
        problems.append(f"ZOOM_LEVELS는 양수 배율 목록이어야 합니다: {levels}")
    elif list(levels) != sorted(set(levels)):
        problems.append(f"ZOOM_LEVELS는 중복 없이 오름차순이어야 합니다: {levels}")
    if config.DEFAULT_ZOOM not in levels:
        problems.append(f"DEFAULT_ZOOM({config.DEFAULT_ZOOM})이 ZOOM_LEVELS에 없습니다.")
    if config.DEFAULT_QUESTIONS <= 0:
        problems.append(f"DEFAULT_QUESTIONS는 1 이상이어야 합니다: {config.DEFAULT_QUESTIONS}")
    if not any(min_score == 0 for min_score, _, _ in config.GRADE_BANDS):
        problems.append("GRADE_BANDS에 0점 기준 등급이 없습니다.")
    return problems


def _unpaired_files(data_dir: str, subject: Subject) -> Dict[str, List[str]]:
    """PDF만 있거나 정답 파일만 있는 시험 (응시 목록에 나오지 않는다)."""
    unpaired: Dict[str, List[str]] = {"pdf_only": [], "answers_only": []}
    for year in config.EXAM_YEARS:
        for exam_type in ExamType:
            identity = ExamIdentity(subject=subject, year=year, exam_type=exam_type)
            has_pdf = os.path.isfile(identity.document_path(data_dir))
            has_answers = os.path.isfile(identity.answer_path(data_dir))
            if has_pdf and not has_answers:
                unpaired["pdf_only"].append(identity.file_stem)
            elif has_answers and not has_pdf:
                unpaired["answers_only"].append(identity.file_stem)
    return unpaired


def check_data_dir(data_dir: str = config.DATA_DIR) -> Dict[str, int]:
    """
    DATA_DIR 점검 후 과목별 응시 가능 시험 수를 반환한다.
    디렉토리가 없으면 빈 dict.
    """
    if not os.path.isdir(data_dir):
        logger.warning(f"데이터 디렉토리가 없습니다: {data_dir} (CBT_DATA_DIR 확인)")
        return {}

    counts = count_available_exams(data_dir)
    for subject in Subject:
        unpaired = _unpaired_files(data_dir, subject)
        logger.info(f"{subject.display_name}: 응시 가능 {counts[subject.value]}회")
        if unpaired["pdf_only"]:
            logger.warning(f"{subject.display_name}: 정답 파일 없음 {unpaired['pdf_only']}")
        if unpaired["answers_only"]:
            logger.warning(f"{subject.display_name}: 시험지 PDF 없음 {unpaired['answers_only']}")

    total = sum(counts.values())
    if total == 0:
        logger.warning(f"응시 가능한 시험이 없습니다. {data_dir}/<과목>/<연도>_<종류>.pdf 를 확인하세요.")
    else:
        logger.info(f"데이터 디렉토리: {data_dir} (총 {total}회)")
    return counts


# ── 서버 실행 ───────────────────────────────────────────────────────────────

def _pick_port(preferred: int) -> int:
    """선호 포트가 사용 중이면 빈 포트를 새로 할당."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((config.DEFAULT_HOST, preferred))
        except OSError:
            s.bind((config.DEFAULT_HOST, 0))
        return s.getsockname()[1]


def _open_browser_when_ready(port: int, timeout: float = 15.0) -> None:
    url = f"http://{config.DEFAULT_HOST}:{port}"
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            with socket.create_connection((config.DEFAULT_HOST, port), timeout=0.5):
                break
        except OSError:
            time.sleep(0.1)
    else:
        logger.error(f"서버 시작 제한 시간({timeout:.0f}초)을 초과했습니다. 직접 접속하세요: {url}")
        return
    logger.info(f"서버 준비 완료: {url}")
    webbrowser.open(url)


def main() -> None:
    setup_logging()
    logger.info("=== 9급 공무원 CBT 시작 ===")

    problems = check_config()
    for problem in problems:
        logger.error(f"설정 오류: {problem}")
    if problems:
        sys.exit(1)

    check_data_dir(config.DATA_DIR)

    port = _pick_port(config.DEFAULT_PORT)
    threading.Thread(target=_open_browser_when_ready, args=(port,), daemon=True).start()
    logger.info(f"Uvicorn 서버 시작 - Port: {port}")
    uvicorn.run(create_app(config.DATA_DIR), host=config.DEFAULT_HOST, port=port, log_level="warning")
    logger.info("서버가 종료되었습니다.")


if __name__ == "__main__":
    main()
