"""
services/answer_source.py

정답 파일 로더: data/{subject}/{year}_{type}_answers.json
"""

import json
import logging

from pydantic import ValidationError

from civil_exam_cbt.errors import AnswerSourceError
from civil_exam_cbt.models.exam_identity import ExamIdentity
from civil_exam_cbt.models.session_state import AnswerKey

logger = logging.getLogger(__name__)


def load_answer_key(data_dir: str, identity: ExamIdentity) -> AnswerKey:
    """
    정답 파일을 읽어 AnswerKey로 반환한다.

    파일이 없거나, JSON이 아니거나, 형식이 맞지 않으면 AnswerSourceError.
    재시도하지 않는다. 기본값 폴백은 호출자가 결정한다.
    """
    path = identity.answer_path(data_dir)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise AnswerSourceError(f"정답 파일이 없습니다: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise AnswerSourceError(f"정답 파일을 읽을 수 없습니다: {path} ({e})") from e

    try:
        key = AnswerKey.model_validate(data)
    except ValidationError as e:
        raise AnswerSourceError(f"정답 파일 형식 오류: {path}") from e

    recorded = sum(1 for a in key.answers if a is not None)
    logger.info(f"정답 데이터 로드 완료: {path} ({key.total_questions}문항, 정답 {recorded}개)")
    return key
