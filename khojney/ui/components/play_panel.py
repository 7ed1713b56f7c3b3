"""Component showing the running question, its countdown and options."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import Qt
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from khojney.constants.quiz_constants import TIME_WARNING_WINDOW_SECONDS
from khojney.constants.ui_constants import (
    FINISH_QUIZ_BUTTON,
    NEXT_QUESTION_BUTTON,
    QUESTION_COUNTER_TEMPLATE,
    QUIT_BUTTON,
    REMAINING_TEMPLATE,
    TIME_UP_MESSAGE,
)
from khojney.core.models import QuizPhase
from khojney.core.services.quiz_session import QuizSession
from khojney.styling.color_palette import ColorPalette, Theme
from khojney.styling.styles import Styles
from khojney.ui.question_renderer import option_button_label, render_question


class PlayPanel(QWidget):
    """Renders a ``QuizSession``; user input is forwarded through callbacks."""

    def __init__(
        self,
        on_option_clicked: Callable[[str], None],
        on_next: Callable[[], None],
        on_quit: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_option_clicked = on_option_clicked
        self.on_next = on_next
        self.on_quit = on_quit
        self._game_font_size: int = 14
        self._option_buttons: list[QPushButton] = []
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header_row = QHBoxLayout()
        self.category_label = QLabel("", self)
        header_row.addWidget(self.category_label)
        header_row.addStretch()
        self.counter_label = QLabel("", self)
        header_row.addWidget(self.counter_label)
        layout.addLayout(header_row)

        timer_row = QHBoxLayout()
        self.time_label = QLabel("", self)
        timer_row.addWidget(self.time_label)
        self.time_progress = QProgressBar(self)
        self.time_progress.setTextVisible(False)
        timer_row.addWidget(self.time_progress, stretch=1)
        layout.addLayout(timer_row)

        self.question_view = QWebEngineView(self)
        self.question_view.setFocusPolicy(Qt.NoFocus)
        layout.addWidget(self.question_view, stretch=1)

        self.options_layout = QVBoxLayout()
        layout.addLayout(self.options_layout)

        self.status_label = QLabel("", self)
        layout.addWidget(self.status_label)

        footer_row = QHBoxLayout()
        self.quit_button = QPushButton(QUIT_BUTTON, self)
        self.quit_button.setFocusPolicy(Qt.NoFocus)
        self.quit_button.clicked.connect(self.on_quit)
        footer_row.addWidget(self.quit_button)
        footer_row.addStretch()
        self.next_button = QPushButton(NEXT_QUESTION_BUTTON, self)
        self.next_button.setFocusPolicy(Qt.NoFocus)
        self.next_button.clicked.connect(self.on_next)
        self.next_button.setVisible(False)
        footer_row.addWidget(self.next_button)
        layout.addLayout(footer_row)

    def show_question(self, session: QuizSession, category_name: str) -> None:
        self.category_label.setText(category_name)
        self.counter_label.setText(
            QUESTION_COUNTER_TEMPLATE.format(current=session.current_index + 1, total=session.total_questions)
        )
        self.question_view.setHtml(render_question(session.current_question.text, self._game_font_size))
        self._rebuild_option_buttons(session)
        self.status_label.setText("")
        self.next_button.setVisible(False)
        self.time_progress.setRange(0, session.time_budget_seconds)
        self.update_time(session.remaining_seconds, session.time_budget_seconds)

    def update_time(self, remaining_seconds: int, budget_seconds: int) -> None:
        self.time_progress.setValue(remaining_seconds)
        self.time_label.setText(REMAINING_TEMPLATE.format(seconds=remaining_seconds))
        self._set_time_emphasis(0 < remaining_seconds <= min(TIME_WARNING_WINDOW_SECONDS, budget_seconds))

    def show_locked(self, session: QuizSession, option_id: str | None) -> None:
        question = session.current_question
        for button, option in zip(self._option_buttons, session.current_options):
            button.setEnabled(False)
            if option.id == question.correct_option_id:
                button.setStyleSheet(self._option_style(ColorPalette.SUCCESS.get(Theme.DARK)))
            elif option.id == option_id:
                button.setStyleSheet(self._option_style(ColorPalette.ERROR.get(Theme.DARK)))
        if option_id is None:
            self.status_label.setText(TIME_UP_MESSAGE)
        self._set_time_emphasis(False)
        self.next_button.setText(FINISH_QUIZ_BUTTON if session.is_last_question else NEXT_QUESTION_BUTTON)
        self.next_button.setVisible(session.phase is QuizPhase.ANSWER_LOCKED)

    def _rebuild_option_buttons(self, session: QuizSession) -> None:
        while self.options_layout.count():
            item = self.options_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self._option_buttons = []
        for position, option in enumerate(session.current_options, start=1):
            button = QPushButton(option_button_label(position, option.text), self)
            button.setFocusPolicy(Qt.NoFocus)
            button.setStyleSheet(self._option_style(None))
            button.clicked.connect(lambda _checked=False, option_id=option.id: self.on_option_clicked(option_id))
            self.options_layout.addWidget(button)
            self._option_buttons.append(button)

    def _option_style(self, background: str | None) -> str:
        return Styles.get_option_button_style(self._game_font_size, background)

    def _set_time_emphasis(self, enabled: bool) -> None:
        self.time_label.setStyleSheet(Styles.get_time_label_style(self._game_font_size, warning=enabled))

    def apply_font_size(self, font_size: int) -> None:
        self._game_font_size = font_size
        style = f"font-size: {font_size}pt;"
        for widget in (self.category_label, self.counter_label, self.status_label, self.next_button, self.quit_button):
            widget.setStyleSheet(style)
        for button in self._option_buttons:
            if button.isEnabled():
                button.setStyleSheet(self._option_style(None))
        self._set_time_emphasis(False)
