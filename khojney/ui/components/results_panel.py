"""Component summarising a finished attempt."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from khojney.constants.ui_constants import (
    BACK_TO_CATEGORIES_BUTTON,
    RETRY_SAVE_BUTTON,
    SAVE_FAILED_MESSAGE,
    SAVE_OK_MESSAGE,
)
from khojney.core.models import QuizResult
from khojney.styling.styles import Styles


class ResultsPanel(QWidget):
    """Shows the score as soon as it is known, independent of saving."""

    def __init__(
        self,
        results_base_url: str,
        on_retry_save: Callable[[], None],
        on_back: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.results_base_url = results_base_url.rstrip("/") + "/"
        self.on_retry_save = on_retry_save
        self.on_back = on_back
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.score_label = QLabel("", self)
        self.score_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.score_label)

        self.details_label = QLabel("", self)
        layout.addWidget(self.details_label)

        self.review_list = QListWidget(self)
        layout.addWidget(self.review_list, stretch=1)

        self.save_status_label = QLabel("", self)
        self.save_status_label.setWordWrap(True)
        self.save_status_label.setOpenExternalLinks(True)
        layout.addWidget(self.save_status_label)

        button_row = QHBoxLayout()
        self.retry_button = QPushButton(RETRY_SAVE_BUTTON, self)
        self.retry_button.clicked.connect(self.on_retry_save)
        self.retry_button.setVisible(False)
        button_row.addWidget(self.retry_button)
        button_row.addStretch()
        self.back_button = QPushButton(BACK_TO_CATEGORIES_BUTTON, self)
        self.back_button.clicked.connect(self.on_back)
        button_row.addWidget(self.back_button)
        layout.addLayout(button_row)

    def show_result(self, result: QuizResult, category_name: str, saving: bool) -> None:
        self.score_label.setText(f"{category_name}: {result.score} / {result.total_questions}")
        self.details_label.setText(
            f"Accuracy {result.accuracy_percent}%  ·  Time {result.elapsed_seconds}s  ·  "
            f"{result.seconds_per_question}s per question  ·  {result.unanswered_count} timed out"
        )
        self.review_list.clear()
        for index, row in enumerate(result.review, start=1):
            if not row.was_answered:
                verdict = "⏱"
            elif row.is_correct:
                verdict = "✓"
            else:
                verdict = "✗"
            first_line = row.question_text.strip().splitlines()[0]
            self.review_list.addItem(f"{verdict} {index}. {first_line}  →  {row.correct_option_text}")
        self.save_status_label.setText("Saving…" if saving else "")
        self.retry_button.setVisible(False)

    def show_saved(self, attempt_id: str | None) -> None:
        if attempt_id is None:
            self.save_status_label.setText(SAVE_OK_MESSAGE)
        else:
            url = f"{self.results_base_url}{attempt_id}"
            self.save_status_label.setText(f'{SAVE_OK_MESSAGE} <a href="{url}">View full results</a>')
        self.retry_button.setVisible(False)

    def show_save_failed(self, detail: str) -> None:
        self.save_status_label.setText(f"{SAVE_FAILED_MESSAGE}\n{detail}")
        self.retry_button.setVisible(True)
