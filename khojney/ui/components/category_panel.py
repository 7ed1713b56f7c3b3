"""Component for choosing a category and quiz options."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox,
    QFormLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from khojney.constants.quiz_constants import DIFFICULTY_LEVELS, QUESTION_LIMIT_CHOICES, QUIZ_MODES
from khojney.constants.ui_constants import (
    ALL_DIFFICULTIES_LABEL,
    ALL_QUESTIONS_LABEL,
    CATEGORY_PANEL_TITLE,
    FEATURED_MARKER,
    NO_CATEGORIES_MESSAGE,
    START_BUTTON_TEXT,
)
from khojney.core.models import Category
from khojney.styling.styles import Styles


class CategoryPanel(QWidget):
    """Lists categories and collects mode, difficulty and question limit."""

    def __init__(self, on_start: Callable[[], None], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.on_start = on_start
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.title_label = QLabel(CATEGORY_PANEL_TITLE, self)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.title_label)

        self.category_list = QListWidget(self)
        self.category_list.itemDoubleClicked.connect(lambda _item: self.on_start())
        self.category_list.currentItemChanged.connect(lambda *_: self._update_start_enabled())
        layout.addWidget(self.category_list, stretch=1)

        self.empty_label = QLabel(NO_CATEGORIES_MESSAGE, self)
        self.empty_label.setVisible(False)
        layout.addWidget(self.empty_label)

        form = QFormLayout()
        self.mode_combo = QComboBox(self)
        for mode in QUIZ_MODES:
            self.mode_combo.addItem(mode, mode)
        form.addRow("Mode:", self.mode_combo)

        self.difficulty_combo = QComboBox(self)
        self.difficulty_combo.addItem(ALL_DIFFICULTIES_LABEL, None)
        for level in DIFFICULTY_LEVELS:
            self.difficulty_combo.addItem(level.title(), level)
        form.addRow("Difficulty:", self.difficulty_combo)

        self.limit_combo = QComboBox(self)
        self.limit_combo.addItem(ALL_QUESTIONS_LABEL, None)
        for limit in QUESTION_LIMIT_CHOICES:
            self.limit_combo.addItem(f"{limit} questions", limit)
        form.addRow("Questions:", self.limit_combo)
        layout.addLayout(form)

        self.start_button = QPushButton(START_BUTTON_TEXT, self)
        self.start_button.clicked.connect(self.on_start)
        self.start_button.setEnabled(False)
        layout.addWidget(self.start_button)

    def set_categories(self, categories: list[Category]) -> None:
        self.category_list.clear()
        for category in categories:
            marker = f"{FEATURED_MARKER} " if category.featured else ""
            item = QListWidgetItem(f"{marker}{category.name} ({len(category.questions)} questions)")
            item.setData(Qt.UserRole, category.slug)
            self.category_list.addItem(item)
        self.empty_label.setVisible(not categories)
        if categories:
            self.category_list.setCurrentRow(0)
        self._update_start_enabled()

    def selected_category_slug(self) -> str | None:
        item = self.category_list.currentItem()
        if item is None:
            return None
        return item.data(Qt.UserRole)

    def selected_mode(self) -> str:
        return self.mode_combo.currentData()

    def selected_difficulty(self) -> str | None:
        return self.difficulty_combo.currentData()

    def selected_limit(self) -> int | None:
        return self.limit_combo.currentData()

    def _update_start_enabled(self) -> None:
        self.start_button.setEnabled(self.selected_category_slug() is not None)

    def apply_font_size(self, font_size: int) -> None:
        style = f"font-size: {font_size}pt;"
        for widget in (self.category_list, self.mode_combo, self.difficulty_combo, self.limit_combo, self.start_button):
            widget.setStyleSheet(style)
