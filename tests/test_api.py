import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from civil_exam_cbt.errors import DocumentUnavailableError
from civil_exam_cbt.services.document_viewport import DocumentViewport
from civil_exam_cbt.services.storage import MemoryStorage

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
START = {"subject": "korean", "year": 2024, "type": "national"}


@pytest.fixture
def client(data_dir):
    app = create_app(data_dir=data_dir, storage=MemoryStorage(), cleanup_interval=None)
    return TestClient(app)


def test_list_exams(client):
    resp = client.get("/api/exams")
    assert resp.status_code == 200
    subjects = {s["key"]: s for s in resp.json()["subjects"]}
    assert subjects["korean"]["count"] == 1
    assert subjects["korean"]["exams"][0]["title"] == "2024년 국가직 국어"
    assert subjects["english"]["count"] == 0


def test_start_requires_identity(client):
    resp = client.post("/api/exam/start", json={"subject": "korean"})
    assert resp.status_code == 400
    assert resp.json()["detail"]["redirect"] == "/"


def test_start_and_select(client):
    resp = client.post("/api/exam/start", json=START)
    assert resp.status_code == 200
    state = resp.json()
    assert state["phase"] == "active"
    assert state["total_questions"] == 20
    assert state["viewport"]["total_pages"] == 3

    resp = client.post("/api/exam/select", json={"question": 1, "option": 1})
    assert resp.json()["selected"] == 1
    resp = client.post("/api/exam/select", json={"question": 1, "option": 1})
    assert resp.json()["selected"] is None
    assert resp.json()["answered_count"] == 0

    resp = client.post("/api/exam/select", json={"question": 30, "option": 1})
    assert resp.status_code == 422


def test_progress_restore_flow(client):
    client.post("/api/exam/start", json=START)
    client.post("/api/exam/select", json={"question": 2, "option": 3})

    peek = client.get("/api/exam/progress", params=START).json()
    assert peek["available"] is True
    assert peek["answered_count"] == 1

    state = client.post("/api/exam/start", json={**START, "restore": True}).json()
    assert state["restored"] is True
    assert state["answers"] == {"2": 3}


def test_progress_declined_is_cleared(client):
    client.post("/api/exam/start", json=START)
    client.post("/api/exam/select", json={"question": 2, "option": 3})

    state = client.post("/api/exam/start", json={**START, "restore": False}).json()
    assert state["answered_count"] == 0
    assert client.get("/api/exam/progress", params=START).json() == {"available": False}


def test_page_zoom_and_image(client):
    client.post("/api/exam/start", json=START)

    assert client.post("/api/exam/page", json={"page": 99}).json()["current_page"] == 3
    assert client.post("/api/exam/page", json={"action": "prev"}).json()["current_page"] == 2
    assert client.post("/api/exam/zoom", json={"level": 1.5}).json()["zoom"] == 1.5
    assert client.post("/api/exam/zoom", json={"action": "in"}).json()["zoom"] == 1.75

    resp = client.get("/api/exam/page-image")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert resp.content.startswith(PNG_SIGNATURE)


def test_missing_document_is_degraded(client):
    state = client.post(
        "/api/exam/start", json={"subject": "history", "year": 2015, "type": "local"}
    ).json()
    assert state["document_missing"] is True
    assert state["degraded_answers"] is True
    assert state["total_questions"] == 20
    assert client.get("/api/exam/page-image").status_code == 404


def test_page_image_after_document_closed_is_404(client, monkeypatch):
    client.post("/api/exam/start", json=START)

    def closed_render(self):
        raise DocumentUnavailableError("이미 닫힌 PDF입니다")

    monkeypatch.setattr(DocumentViewport, "render", closed_render)
    resp = client.get("/api/exam/page-image")
    assert resp.status_code == 404
    assert resp.json()["detail"]["message"] == "이미 닫힌 PDF입니다"


def test_submit_and_review(client):
    client.post("/api/exam/start", json=START)
    # 정답: 1,2,3,4 반복
    client.post("/api/exam/select", json={"question": 1, "option": 1})
    client.post("/api/exam/select", json={"question": 2, "option": 1})
    client.post("/api/exam/select", json={"question": 3, "option": 3})

    resp = client.post("/api/exam/submit")
    assert resp.json()["ok"] is True
    assert client.get("/api/exam/state").status_code == 404

    results = client.get("/api/results").json()
    assert (results["correct"], results["incorrect"], results["unanswered"]) == (2, 1, 17)
    assert results["score"] == 10
    assert results["grade"]["key"] == "poor"
    assert results["exam"]["title"] == "2024년 국가직 국어"

    # 두 번째 조회도 같은 결과 (이미 꺼낸 결과를 재사용)
    assert client.get("/api/results").json()["score"] == 10

    review = client.post("/api/results/filter", json={"filter": "incorrect"}).json()
    assert [q["number"] for q in review["visible"]] == [2]
    assert client.post("/api/results/next").json()["current_index"] == 0

    review = client.post("/api/results/select", json={"number": 5}).json()
    assert review["filter"] == "all"
    assert review["current"]["number"] == 5

    retry = client.post("/api/results/retry").json()
    assert retry == {"ok": True, "subject": "korean", "year": 2024, "type": "national"}


def test_results_without_submission_redirects(client):
    resp = client.get("/api/results")
    assert resp.status_code == 400
    assert resp.json()["detail"]["redirect"] == "/"


def test_reset_session(client):
    client.post("/api/exam/start", json=START)
    assert client.post("/api/reset").json() == {"ok": True}
    assert client.get("/api/exam/state").status_code == 404
