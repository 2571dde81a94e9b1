import os

# 기본 디렉토리 설정
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# 경로 설정
STATIC_DIR = os.path.join(BASE_DIR, "static")
DATA_DIR = os.getenv("CBT_DATA_DIR", os.path.join(BASE_DIR, "data"))
LOG_FILE = os.path.join(BASE_DIR, "launch.log")
PROGRESS_DB_PATH = os.getenv("CBT_PROGRESS_DB", os.path.join(BASE_DIR, "progress.db"))

# 서버 설정
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
SESSION_TTL = 3600  # 브라우저 세션 유지 시간 (1시간)

# 시험 설정
DEFAULT_QUESTIONS = 20      # 정답 파일이 없을 때 사용할 기본 문항 수
OPTION_COUNT = 4            # 문항당 보기 수
PROGRESS_TTL_SECONDS = 24 * 60 * 60   # 저장된 답안 유효 시간 (24시간)
EXAM_YEARS = list(range(2025, 2011, -1))  # 2025 ~ 2012

# PDF 뷰어 설정
ZOOM_LEVELS = [1, 1.25, 1.5, 1.75, 2, 2.5, 3]
DEFAULT_ZOOM = 1

# 등급 기준 (최소 점수, 키, 표시명). 위에서부터 평가
GRADE_BANDS = [
    (90, "excellent", "우수"),
    (70, "good", "합격 예상"),
    (50, "average", "노력 필요"),
    (0, "poor", "재도전"),
]
