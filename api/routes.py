"""
api/routes.py — FastAPI 엔드포인트
"""

import asyncio
from typing import Literal, Optional, Union

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

import api.session as session
from civil_exam_cbt.errors import (
    DocumentUnavailableError, ExamNavigationError, SessionStateError,
)
from civil_exam_cbt.models.exam_identity import ExamIdentity, ExamType, Subject
from civil_exam_cbt.services.exam_catalog import scan_available_exams
from civil_exam_cbt.services.exam_service import score_result
from civil_exam_cbt.services.exam_session import ExamSession
from civil_exam_cbt.services.persistence import ProgressStore
from civil_exam_cbt.services.review_navigator import ReviewFilter, ReviewNavigator
from civil_exam_cbt.services.timer import format_duration, format_time

router = APIRouter()


# ── Pydantic request bodies ──────────────────────────────────────────────────

class StartExamBody(BaseModel):
    subject: Optional[str] = None
    year: Optional[Union[int, str]] = None
    type: Optional[str] = None
    restore: bool = False

class SelectAnswerBody(BaseModel):
    question: int
    option: int

class ResetAnswersBody(BaseModel):
    confirm: bool = True

class PageBody(BaseModel):
    page: Optional[int] = None
    action: Optional[Literal["next", "prev"]] = None

class ZoomBody(BaseModel):
    level: Optional[float] = None
    action: Optional[Literal["in", "out", "reset"]] = None

class FilterBody(BaseModel):
    filter: ReviewFilter = ReviewFilter.ALL

class DetailBody(BaseModel):
    number: int


# ── 헬퍼 ─────────────────────────────────────────────────────────────────────

def _sid(request: Request) -> str:
    return request.state.session_id


def _progress_store(request: Request) -> ProgressStore:
    return request.app.state.progress_store


def _navigation_error(message: str) -> HTTPException:
    # 클라이언트는 redirect 경로로 이동한다
    return HTTPException(status_code=400, detail={"message": message, "redirect": "/"})


def _exam(request: Request) -> ExamSession:
    exam: Optional[ExamSession] = session.get(_sid(request), "exam")
    if exam is None:
        raise HTTPException(status_code=404, detail="진행 중인 시험이 없습니다.")
    return exam


def _review(request: Request) -> ReviewNavigator:
    review: Optional[ReviewNavigator] = session.get(_sid(request), "review")
    if review is None:
        raise HTTPException(status_code=404, detail="결과 정보가 없습니다.")
    return review


def _exam_state(exam: ExamSession) -> dict:
    d = exam.to_dict()
    d["elapsed_display"] = format_time(d["elapsed_seconds"])
    return d


# ── 시험 목록 ────────────────────────────────────────────────────────────────

@router.get("/api/exams")
async def list_exams(request: Request):
    data_dir = request.app.state.data_dir
    subjects = []
    for subject in Subject:
        available = await asyncio.to_thread(scan_available_exams, data_dir, subject)
        subjects.append({
            "key": subject.value,
            "name": subject.display_name,
            "count": len(available),
            "exams": [
                {"year": i.year, "type": i.exam_type.value, "title": i.title}
                for i in available
            ],
        })
    return {
        "subjects": subjects,
        "exam_types": {t.value: t.display_name for t in ExamType},
    }


# ── 시험 진행 ────────────────────────────────────────────────────────────────

@router.get("/api/exam/progress")
async def peek_progress(
    request: Request,
    subject: Optional[str] = None,
    year: Optional[str] = None,
    type: Optional[str] = None,
):
    try:
        identity = ExamIdentity.from_params(subject, year, type)
    except ExamNavigationError as e:
        raise _navigation_error(str(e))

    progress = _progress_store(request).load(identity)
    if progress is None or not progress.answers:
        return {"available": False}
    return {
        "available": True,
        "answered_count": len(progress.answers),
        "elapsed_seconds": progress.elapsed_seconds,
        "timestamp": progress.timestamp,
    }


@router.post("/api/exam/start")
async def start_exam(request: Request, body: StartExamBody):
    try:
        identity = ExamIdentity.from_params(body.subject, body.year, body.type)
    except ExamNavigationError as e:
        raise _navigation_error(str(e))

    sid = _sid(request)
    previous: Optional[ExamSession] = session.get(sid, "exam")
    if previous is not None:
        previous.close()

    exam = ExamSession(
        identity,
        _progress_store(request),
        data_dir=request.app.state.data_dir,
    )
    await asyncio.to_thread(exam.start, lambda progress: body.restore)
    session.put(sid, "exam", exam)
    return _exam_state(exam)


@router.get("/api/exam/state")
async def get_exam_state(request: Request):
    return _exam_state(_exam(request))


@router.post("/api/exam/select")
async def select_answer(request: Request, body: SelectAnswerBody):
    exam = _exam(request)
    try:
        selected = exam.select(body.question, body.option)
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {
        "ok": True,
        "question": body.question,
        "selected": selected,
        "answered_count": exam.answered_count,
        "progress_percent": exam.progress_percent,
    }


@router.post("/api/exam/reset")
async def reset_answers(request: Request, body: ResetAnswersBody):
    exam = _exam(request)
    try:
        done = exam.reset_answers(lambda: body.confirm)
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"ok": done, "answered_count": exam.answered_count}


@router.post("/api/exam/page")
async def change_page(request: Request, body: PageBody):
    viewport = _exam(request).viewport
    if body.action == "next":
        viewport.next_page()
    elif body.action == "prev":
        viewport.prev_page()
    elif body.page is not None:
        viewport.go_to_page(body.page)
    return viewport.to_dict()


@router.post("/api/exam/zoom")
async def change_zoom(request: Request, body: ZoomBody):
    viewport = _exam(request).viewport
    if body.action == "in":
        viewport.zoom_in()
    elif body.action == "out":
        viewport.zoom_out()
    elif body.action == "reset":
        viewport.zoom_reset()
    elif body.level is not None:
        viewport.set_zoom(body.level)
    return viewport.to_dict()


@router.get("/api/exam/page-image")
async def page_image(request: Request):
    exam = _exam(request)
    try:
        png = await asyncio.to_thread(exam.viewport.render)
    except DocumentUnavailableError as e:
        # 렌더링 중에 제출/세션 종료로 PDF가 닫힌 경우
        raise HTTPException(status_code=404, detail={"message": str(e)})
    if png is None:
        raise HTTPException(
            status_code=404,
            detail={
                "message": "PDF 파일을 찾을 수 없습니다.",
                "expected_path": exam.identity.document_path(request.app.state.data_dir),
            },
        )
    return Response(content=png, media_type="image/png")


@router.post("/api/exam/submit")
async def submit_exam(request: Request):
    sid = _sid(request)
    exam = _exam(request)
    try:
        result = exam.submit()
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))

    session.get(sid, "handoff").put(result)
    session.put(sid, "exam", None)
    session.put(sid, "review", None)
    session.put(sid, "result", None)
    return {"ok": True, "redirect": "/result"}


# ── 결과 ─────────────────────────────────────────────────────────────────────

@router.get("/api/results")
async def get_results(request: Request):
    sid = _sid(request)
    result = session.get(sid, "result")
    if result is None:
        try:
            result = session.get(sid, "handoff").take()
            ExamIdentity.from_params(result.subject, result.year, result.type)
        except ExamNavigationError as e:
            raise _navigation_error(str(e))
        session.put(sid, "result", result)
        session.put(sid, "review", ReviewNavigator(score_result(result)))

    review: ReviewNavigator = session.get(sid, "review")
    report = review.report
    identity = ExamIdentity.from_params(result.subject, result.year, result.type)
    return {
        "exam": {
            "subject": result.subject,
            "year": result.year,
            "type": result.type,
            "title": identity.title,
            "submitted_at": result.submitted_at.isoformat(),
        },
        "total_questions": report.total_questions,
        "correct": report.correct,
        "incorrect": report.incorrect,
        "unanswered": report.unanswered,
        "score": report.score,
        "grade": report.grade.model_dump(),
        "elapsed_seconds": report.elapsed_seconds,
        "elapsed_display": format_duration(report.elapsed_seconds),
        "review": review.to_dict(),
    }


@router.post("/api/results/filter")
async def set_review_filter(request: Request, body: FilterBody):
    review = _review(request)
    review.set_filter(body.filter)
    return review.to_dict()


@router.post("/api/results/next")
async def next_detail(request: Request):
    review = _review(request)
    review.next()
    return review.to_dict()


@router.post("/api/results/prev")
async def prev_detail(request: Request):
    review = _review(request)
    review.prev()
    return review.to_dict()


@router.post("/api/results/select")
async def select_detail(request: Request, body: DetailBody):
    review = _review(request)
    try:
        review.select(body.number)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return review.to_dict()


@router.post("/api/results/retry")
async def retry_exam(request: Request):
    result = session.get(_sid(request), "result")
    if result is None:
        raise _navigation_error("결과 정보가 없습니다.")
    identity = ExamIdentity.from_params(result.subject, result.year, result.type)
    _progress_store(request).clear(identity)
    return {
        "ok": True,
        "subject": identity.subject.value,
        "year": identity.year,
        "type": identity.exam_type.value,
    }


@router.post("/api/reset")
async def reset_session(request: Request):
    session.reset(_sid(request))
    return {"ok": True}
