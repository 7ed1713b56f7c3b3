"""Qt UI components for the quiz client."""

from .dialog_helpers import (
    confirm_quit,
    show_error,
    show_info,
    show_warning,
)
from .qt_scheduler import QtScheduler
from .question_renderer import option_button_label, render_question
from .quiz_play_window import QuizPlayWindow

__all__ = [
    "QuizPlayWindow",
    "QtScheduler",
    "confirm_quit",
    "show_error",
    "show_info",
    "show_warning",
    "option_button_label",
    "render_question",
]
