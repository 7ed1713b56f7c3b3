"""Question rendering utilities for displaying quiz questions."""

from __future__ import annotations

from khojney.core.markdown_math_renderer import renderer


def render_question(question_text: str, font_size: int = 14) -> str:
    """Render the question text as a full HTML document.

    Args:
        question_text: The question text (supports Markdown and LaTeX)
        font_size: Font size in points for the question text (default 14)

    Returns:
        HTML string ready for display in QWebEngineView
    """
    return renderer.render_full_document(question_text.strip() or "(No question text)", font_size=font_size)


def option_button_label(position: int, option_text: str) -> str:
    """Label for an option button; the number doubles as the keyboard shortcut."""
    first_line = option_text.strip().splitlines()[0] if option_text.strip() else "(empty)"
    return f"{position}. {first_line}"
