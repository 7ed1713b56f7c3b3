"""FastAPI server that exposes categories and finished attempts."""

from __future__ import annotations

from datetime import datetime, timezone
from html import escape
from threading import Thread
from typing import Any

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
import uvicorn

from khojney.constants.about import APP_NAME, APP_VERSION
from khojney.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from khojney.core.markdown_math_renderer import renderer
from khojney.core.models import AnswerReview, AttemptRecord, AttemptStatus
from khojney.core.quiz_manager import QuizManager
from khojney.core.services.attempt_store import AttemptNotFoundError

_RESULTS_CSS = """
      body { background: #0b1120; }
      .card { background: #111a30; border-radius: 0.75rem; padding: 1.5rem; margin-bottom: 1rem; }
      .stats { display: grid; grid-template-columns: repeat(auto-fit, minmax(140px, 1fr)); gap: 0.75rem; }
      .stat-value { font-size: 1.6rem; font-weight: bold; color: #22d3ee; }
      .stat-label { color: #94a3b8; font-size: 0.9rem; }
      .correct { color: #4ade80; }
      .incorrect { color: #f87171; }
      .unanswered { color: #facc15; }
      .explanation { color: #94a3b8; font-size: 0.95rem; }
      a { color: #22d3ee; }
"""


class CategoryResponse(BaseModel):
    """Category summary returned by the API."""
    slug: str
    name: str
    question_count: int
    featured: bool


class AnswerReviewResponse(BaseModel):
    """Review row for one question of an attempt."""
    question_id: str
    question_text: str
    selected_option_id: str | None
    selected_option_text: str | None
    correct_option_id: str
    correct_option_text: str
    is_correct: bool
    explanation: str


class AttemptResponse(BaseModel):
    """Attempt summary, with the tally once the attempt is completed."""
    attempt_id: str
    user_id: str
    category_id: str
    status: str
    settings: dict[str, Any]
    created_at: datetime
    completed_at: datetime | None = None
    score: int | None = None
    total_questions: int | None = None
    elapsed_seconds: int | None = None
    accuracy_percent: int | None = None
    answers: dict[str, str] | None = None
    review: list[AnswerReviewResponse] | None = None


def _to_review_response(row: AnswerReview) -> AnswerReviewResponse:
    return AnswerReviewResponse(
        question_id=row.question_id,
        question_text=row.question_text,
        selected_option_id=row.selected_option_id,
        selected_option_text=row.selected_option_text,
        correct_option_id=row.correct_option_id,
        correct_option_text=row.correct_option_text,
        is_correct=row.is_correct,
        explanation=row.explanation,
    )


def _to_attempt_response(record: AttemptRecord, include_review: bool = False) -> AttemptResponse:
    response = AttemptResponse(
        attempt_id=record.attempt_id,
        user_id=record.user_id,
        category_id=record.category_id,
        status=record.status.value,
        settings=dict(record.settings),
        created_at=record.created_at,
        completed_at=record.completed_at,
    )
    result = record.result
    if result is None:
        return response
    response.score = result.score
    response.total_questions = result.total_questions
    response.elapsed_seconds = result.elapsed_seconds
    response.accuracy_percent = result.accuracy_percent
    if include_review:
        response.answers = dict(result.answers)
        response.review = [_to_review_response(row) for row in result.review]
    return response


def _render_review_row(index: int, row: AnswerReview) -> str:
    if not row.was_answered:
        verdict = '<span class="unanswered">⏱ Not answered</span>'
    elif row.is_correct:
        verdict = '<span class="correct">✓ Correct</span>'
    else:
        verdict = '<span class="incorrect">✗ Incorrect</span>'
    selected = (
        renderer.render_inline(row.selected_option_text)
        if row.selected_option_text is not None
        else "<em>none</em>"
    )
    parts = [
        '<section class="card">',
        f"<h3>Question {index}</h3>",
        renderer.render_fragment(row.question_text),
        f"<p>{verdict}</p>",
        f"<p>Your answer: {selected}</p>",
        f"<p>Correct answer: {renderer.render_inline(row.correct_option_text)}</p>",
    ]
    if row.explanation:
        parts.append(f'<div class="explanation">{renderer.render_fragment(row.explanation)}</div>')
    parts.append("</section>")
    return "\n".join(parts)


def render_results_page(record: AttemptRecord, category_name: str) -> str:
    """Build the HTML results page for a completed attempt."""
    result = record.result
    if result is None:
        raise ValueError(f"Attempt {record.attempt_id} has no result yet.")
    stats = [
        (f"{result.score}/{result.total_questions}", "Score"),
        (f"{result.accuracy_percent}%", "Accuracy"),
        (f"{result.elapsed_seconds}s", "Time taken"),
        (f"{result.seconds_per_question}s", "Per question"),
        (str(result.unanswered_count), "Timed out"),
    ]
    stat_html = "".join(
        f'<div><div class="stat-value">{escape(value)}</div><div class="stat-label">{label}</div></div>'
        for value, label in stats
    )
    reviews = "\n".join(_render_review_row(i, row) for i, row in enumerate(result.review, start=1))
    body = (
        f'<section class="card"><h1>{escape(category_name)}</h1>'
        f'<p class="stat-label">Mode: {escape(str(record.settings.get("mode", "")))}</p>'
        f'<div class="stats">{stat_html}</div></section>\n{reviews}'
    )
    title = f"My {APP_NAME} result: {result.score} in {category_name}"
    return renderer.wrap_with_mathjax(body, title=title, extra_css=_RESULTS_CSS)


def _render_index_page(records: list[AttemptRecord]) -> str:
    rows = []
    for record in records:
        if record.status is not AttemptStatus.COMPLETED or record.result is None:
            continue
        rows.append(
            f'<li><a href="/results/{escape(record.attempt_id)}">{escape(record.category_id)}</a>'
            f": {record.result.score}/{record.result.total_questions}"
            f" ({record.created_at.astimezone(timezone.utc):%Y-%m-%d %H:%M} UTC)</li>"
        )
    listing = "<ul>" + "".join(rows) + "</ul>" if rows else "<p>No finished attempts yet.</p>"
    body = f'<section class="card"><h1>{APP_NAME} results</h1>{listing}</section>'
    return renderer.wrap_with_mathjax(body, title=f"{APP_NAME} results", extra_css=_RESULTS_CSS)


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    def require_attempt(manager: QuizManager, attempt_id: str) -> AttemptRecord:
        try:
            return manager.get_attempt(attempt_id)
        except AttemptNotFoundError as exc:
            raise HTTPException(status_code=404, detail="Attempt not found.") from exc

    @app.get("/", response_class=HTMLResponse)
    def serve_index(manager: QuizManager = Depends(quiz_manager_dep)) -> str:
        return _render_index_page(manager.list_attempts())

    @app.get("/api/categories", response_model=list[CategoryResponse])
    def list_categories(manager: QuizManager = Depends(quiz_manager_dep)) -> list[CategoryResponse]:
        return [
            CategoryResponse(
                slug=category.slug,
                name=category.name,
                question_count=len(category.questions),
                featured=category.featured,
            )
            for category in manager.list_categories()
        ]

    @app.get("/api/attempts", response_model=list[AttemptResponse])
    def list_attempts(
        user_id: str | None = None,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[AttemptResponse]:
        return [_to_attempt_response(record) for record in manager.list_attempts(user_id)]

    @app.get("/api/attempts/{attempt_id}", response_model=AttemptResponse)
    def get_attempt(attempt_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> AttemptResponse:
        record = require_attempt(manager, attempt_id)
        return _to_attempt_response(record, include_review=True)

    @app.get("/results/{attempt_id}", response_class=HTMLResponse)
    def serve_results_page(attempt_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> str:
        record = require_attempt(manager, attempt_id)
        if record.status is not AttemptStatus.COMPLETED:
            raise HTTPException(status_code=409, detail="Attempt has not been completed yet.")
        try:
            category_name = manager.get_category(record.category_id).name
        except KeyError:
            category_name = record.category_id
        return render_results_page(record, category_name)

    return app


def start_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="KhojneyApiServer", daemon=True)
    thread.start()
    return thread
