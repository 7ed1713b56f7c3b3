"""Application entry point for the Khojney quiz client."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from khojney.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from khojney.constants.quiz_constants import FEATURED_CATEGORY_SLUGS
from khojney.core.question_bank import QuestionBankError, load_question_bank
from khojney.core.quiz_manager import QuizManager
from khojney.core.services.attempt_store import InMemoryAttemptStore
from khojney.server.api_server import start_api_server
from khojney.ui.dialog_helpers import show_error
from khojney.ui.quiz_play_window import QuizPlayWindow
from khojney.utils.logging_config import configure_logging

QUESTION_DIR_ENV = "KHOJNEY_QUESTION_DIR"
BUNDLED_QUESTION_DIR = Path(__file__).resolve().parent / "khojney" / "data" / "questions"


def _question_directory() -> Path:
    configured = os.getenv(QUESTION_DIR_ENV)
    return Path(configured) if configured else BUNDLED_QUESTION_DIR


def _results_base_url(host: str, port: int) -> str:
    """Results links point at the local API server; a wildcard bind is shown as localhost."""
    display_host = "127.0.0.1" if host in ("0.0.0.0", "") else host
    return f"http://{display_host}:{port}/results/"


def main() -> None:
    """Initialize logging, load questions, start the API server, and launch the Qt UI."""
    logger = configure_logging()
    logger.info("Starting Khojney...")

    app = QApplication(sys.argv)

    question_dir = _question_directory()
    try:
        question_bank = load_question_bank(question_dir, featured=FEATURED_CATEGORY_SLUGS)
    except (QuestionBankError, OSError) as exc:
        logger.exception("Could not load questions from %s", question_dir)
        show_error(None, "Cannot load questions", str(exc))
        sys.exit(1)
    quiz_manager = QuizManager(question_bank=question_bank, attempt_store=InMemoryAttemptStore())

    start_api_server(quiz_manager=quiz_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    results_base_url = _results_base_url(DEFAULT_HOST, DEFAULT_PORT)
    logger.info("Saved results available under %s", results_base_url)

    window = QuizPlayWindow(quiz_manager=quiz_manager, results_base_url=results_base_url)
    window.resize(900, 700)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
