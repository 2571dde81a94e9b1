"""
errors.py

시험 엔진 예외 계층.

- ExamNavigationError  : 필수 파라미터 누락 등 진입 자체가 불가능한 경우 (메인으로 이동)
- ResultHandoffError   : 결과 데이터가 없거나 손상된 경우 (메인으로 이동)
- AnswerSourceError    : 정답 파일을 읽지 못한 경우 (기본값으로 계속 진행)
- DocumentUnavailableError : 시험지 PDF를 열지 못한 경우 (PDF 없이 계속 진행)
- SessionStateError    : 현재 세션 상태에서 허용되지 않는 호출
"""


class ExamNavigationError(ValueError):
    pass


class ResultHandoffError(ExamNavigationError):
    pass


class AnswerSourceError(RuntimeError):
    pass


class DocumentUnavailableError(RuntimeError):
    pass


class SessionStateError(RuntimeError):
    pass
