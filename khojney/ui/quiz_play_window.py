"""Qt main window implementing the category, play and results modes."""

from __future__ import annotations

from enum import Enum, auto

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeyEvent
from PySide6.QtWidgets import (
    QHBoxLayout,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from khojney.constants.about import (
    APP_ABOUT_TEXT,
    APP_LICENSE,
    APP_NAME,
    APP_VERSION,
    HELP_TEXT,
)
from khojney.constants.quiz_constants import (
    DEFAULT_AUTO_ADVANCE_DELAY_SECONDS,
    DEFAULT_TIME_PER_QUESTION_SECONDS,
    DEFAULT_USER_ID,
)
from khojney.constants.ui_constants import (
    QUIT_CONFIRM_MESSAGE,
    RESULTS_URL_PLACEHOLDER,
    WINDOW_TITLE,
)
from khojney.core.models import Question, QuizPhase, QuizResult, QuizSettings
from khojney.core.quiz_manager import AttemptCreationError, QuizManager
from khojney.core.services.quiz_session import QuizSession, QuizSessionListener
from khojney.core.services.submission import SubmissionError
from khojney.styling.styles import Styles
from khojney.ui.components.category_panel import CategoryPanel
from khojney.ui.components.play_panel import PlayPanel
from khojney.ui.components.results_panel import ResultsPanel
from khojney.ui.dialog_helpers import confirm_quit, show_error, show_info, show_warning
from khojney.ui.qt_scheduler import QtScheduler
from khojney.ui.settings_dialog import SettingsDialog

_DIGIT_KEYS = {
    Qt.Key_1: 1, Qt.Key_2: 2, Qt.Key_3: 3, Qt.Key_4: 4, Qt.Key_5: 5,
    Qt.Key_6: 6, Qt.Key_7: 7, Qt.Key_8: 8, Qt.Key_9: 9,
}
_ADVANCE_KEYS = {Qt.Key_Return, Qt.Key_Enter, Qt.Key_Space}


class WindowMode(Enum):
    """High-level UI mode of the quiz window."""

    CATEGORY = auto()
    PLAY = auto()
    RESULTS = auto()


class _SessionEvents(QuizSessionListener):
    """Forwards session events to the window."""

    def __init__(self, window: QuizPlayWindow) -> None:
        self._window = window

    def question_started(self, session: QuizSession) -> None:
        self._window.play_panel.show_question(session, self._window.active_category_name)

    def time_ticked(self, session: QuizSession, remaining_seconds: int) -> None:
        self._window.play_panel.update_time(remaining_seconds, session.time_budget_seconds)

    def answer_locked(self, session: QuizSession, question: Question, option_id: str | None) -> None:
        self._window.play_panel.show_locked(session, option_id)

    def quiz_completed(self, session: QuizSession, result: QuizResult) -> None:
        self._window.show_results(session, result)

    def submission_saved(self, session: QuizSession, result: QuizResult) -> None:
        self._window.results_panel.show_saved(result.attempt_id)

    def submission_failed(self, session: QuizSession, error: SubmissionError) -> None:
        self._window.results_panel.show_save_failed(str(error.cause))


class QuizPlayWindow(QMainWindow):
    """Main Qt window: pick a category, take the timed quiz, review the score."""

    def __init__(self, quiz_manager: QuizManager, results_base_url: str | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        self.quiz_manager = quiz_manager
        self.results_base_url = results_base_url or RESULTS_URL_PLACEHOLDER
        self.active_category_name: str = ""

        self._mode = WindowMode.CATEGORY
        self._session: QuizSession | None = None
        self._scheduler = QtScheduler(self)
        self._events = _SessionEvents(self)

        self._time_per_question: int = DEFAULT_TIME_PER_QUESTION_SECONDS
        self._auto_advance_delay: float | None = DEFAULT_AUTO_ADVANCE_DELAY_SECONDS
        self._shuffle_seed: int | None = None
        self._game_font_size: int = 14

        self._build_ui()
        self._apply_styles()
        self._load_categories()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self._build_top_buttons(root_layout)

        self.mode_stack = QStackedWidget(self)
        self.category_panel = CategoryPanel(on_start=self._handle_start_quiz, parent=self)
        self.play_panel = PlayPanel(
            on_option_clicked=self._handle_option_clicked,
            on_next=self._handle_next,
            on_quit=self._handle_quit,
            parent=self,
        )
        self.results_panel = ResultsPanel(
            self.results_base_url,
            on_retry_save=self._handle_retry_save,
            on_back=self._handle_back_to_categories,
            parent=self,
        )
        self.mode_stack.addWidget(self.category_panel)
        self.mode_stack.addWidget(self.play_panel)
        self.mode_stack.addWidget(self.results_panel)
        root_layout.addWidget(self.mode_stack)

        self._set_mode(WindowMode.CATEGORY)

    def _build_top_buttons(self, layout: QVBoxLayout) -> None:
        button_row = QHBoxLayout()
        button_row.addStretch()

        self.about_button = QPushButton(f"About {APP_NAME}", self)
        self.about_button.setFocusPolicy(Qt.NoFocus)
        self.about_button.clicked.connect(self._handle_about)
        button_row.addWidget(self.about_button)

        self.help_button = QPushButton("Help", self)
        self.help_button.setFocusPolicy(Qt.NoFocus)
        self.help_button.clicked.connect(self._handle_help)
        button_row.addWidget(self.help_button)

        self.settings_button = QPushButton("Settings", self)
        self.settings_button.setFocusPolicy(Qt.NoFocus)
        self.settings_button.clicked.connect(self._handle_settings)
        button_row.addWidget(self.settings_button)

        layout.addLayout(button_row)

    def _set_mode(self, mode: WindowMode) -> None:
        self._mode = mode
        self.settings_button.setEnabled(mode is not WindowMode.PLAY)
        index_map = {
            WindowMode.CATEGORY: 0,
            WindowMode.PLAY: 1,
            WindowMode.RESULTS: 2,
        }
        self.mode_stack.setCurrentIndex(index_map[mode])
        if mode is WindowMode.PLAY:
            self.setFocus()

    def _load_categories(self) -> None:
        self.category_panel.set_categories(self.quiz_manager.list_categories())

    # --- Quiz flow ---

    def _current_settings(self) -> QuizSettings:
        return QuizSettings(
            mode=self.category_panel.selected_mode(),
            limit=self.category_panel.selected_limit(),
            difficulty=self.category_panel.selected_difficulty(),
            time_per_question_seconds=self._time_per_question,
            auto_advance_delay_seconds=self._auto_advance_delay,
            shuffle_seed=self._shuffle_seed,
        )

    def _handle_start_quiz(self) -> None:
        slug = self.category_panel.selected_category_slug()
        if slug is None:
            return
        self.active_category_name = self.quiz_manager.get_category(slug).name
        try:
            session = self.quiz_manager.start_quiz(
                DEFAULT_USER_ID,
                slug,
                self._current_settings(),
                scheduler=self._scheduler,
                listener=self._events,
            )
        except ValueError as exc:
            show_warning(self, "Cannot start quiz", str(exc))
            return
        except AttemptCreationError as exc:
            show_error(self, "Cannot start quiz", str(exc))
            return
        self._session = session
        self._set_mode(WindowMode.PLAY)

    def _handle_option_clicked(self, option_id: str) -> None:
        if self._session is not None:
            self._session.select_option(option_id)

    def _handle_next(self) -> None:
        if self._session is not None:
            self._session.advance()

    def _handle_quit(self) -> None:
        if self._session is None:
            self._set_mode(WindowMode.CATEGORY)
            return
        if self._session.phase is not QuizPhase.COMPLETED and not confirm_quit(self, QUIT_CONFIRM_MESSAGE):
            return
        self._session.abandon()
        self._session = None
        self._set_mode(WindowMode.CATEGORY)

    def show_results(self, session: QuizSession, result: QuizResult) -> None:
        self.results_panel.show_result(result, self.active_category_name, saving=session.attempt_id is not None)
        self._set_mode(WindowMode.RESULTS)

    def _handle_retry_save(self) -> None:
        if self._session is not None:
            self._session.retry_submission()

    def _handle_back_to_categories(self) -> None:
        self._session = None
        self._set_mode(WindowMode.CATEGORY)

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802 - Qt override
        if self._mode is WindowMode.PLAY and self._session is not None:
            key = event.key()
            if key in _DIGIT_KEYS:
                # Positions always resolve against the options as currently displayed.
                self._session.select_option_at(_DIGIT_KEYS[key])
                return
            if key in _ADVANCE_KEYS:
                self._session.advance()
                return
        super().keyPressEvent(event)

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt override
        if self._session is not None:
            self._session.abandon()
        super().closeEvent(event)

    # --- Dialogs ---

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"About {APP_NAME}", details, font_point_size=self._game_font_size)

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT, font_point_size=self._game_font_size)

    def _handle_settings(self) -> None:
        dialog = SettingsDialog(
            self,
            self._time_per_question,
            self._auto_advance_delay,
            self._shuffle_seed,
            self._game_font_size,
        )
        if dialog.exec():
            self._time_per_question = dialog.get_time_per_question()
            self._auto_advance_delay = dialog.get_auto_advance_delay()
            self._shuffle_seed = dialog.get_shuffle_seed()
            self._game_font_size = dialog.get_game_font_size()
            self._apply_styles()

    def _apply_styles(self) -> None:
        self.setStyleSheet(Styles.get_main_window_style())
        self.category_panel.apply_font_size(self._game_font_size)
        self.play_panel.apply_font_size(self._game_font_size)
