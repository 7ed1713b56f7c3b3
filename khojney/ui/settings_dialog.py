"""Settings dialog for configuring Khojney preferences."""

from __future__ import annotations

from PySide6.QtWidgets import (
    QDialog,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QSpinBox,
    QDoubleSpinBox,
    QPushButton,
    QGroupBox,
    QCheckBox,
)


class SettingsDialog(QDialog):
    """Dialog for configuring quiz and display settings."""

    def __init__(
        self,
        parent=None,
        time_per_question: int = 15,
        auto_advance_delay: float | None = 1.5,
        shuffle_seed: int | None = None,
        game_font_size: int = 14,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setModal(True)
        self.setMinimumWidth(400)

        self._time_per_question = max(5, min(300, time_per_question))
        self._auto_advance_delay = auto_advance_delay
        self._shuffle_seed = shuffle_seed
        self._game_font_size = game_font_size

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        # Timing group
        timing_group = QGroupBox("Timing")
        timing_layout = QVBoxLayout()
        timing_group.setLayout(timing_layout)

        time_row = QHBoxLayout()
        time_label = QLabel("Time per question:")
        time_label.setToolTip("Countdown budget for every question")
        self.time_spinbox = QSpinBox()
        self.time_spinbox.setRange(5, 300)
        self.time_spinbox.setValue(self._time_per_question)
        self.time_spinbox.setSuffix(" s")
        time_row.addWidget(time_label)
        time_row.addStretch()
        time_row.addWidget(self.time_spinbox)
        timing_layout.addLayout(time_row)

        self.auto_advance_checkbox = QCheckBox("Move on automatically when time runs out")
        self.auto_advance_checkbox.setChecked(self._auto_advance_delay is not None)
        timing_layout.addWidget(self.auto_advance_checkbox)

        delay_row = QHBoxLayout()
        delay_label = QLabel("Pause before moving on:")
        self.delay_spinbox = QDoubleSpinBox()
        self.delay_spinbox.setRange(0.0, 10.0)
        self.delay_spinbox.setSingleStep(0.5)
        self.delay_spinbox.setValue(self._auto_advance_delay if self._auto_advance_delay is not None else 1.5)
        self.delay_spinbox.setSuffix(" s")
        self.delay_spinbox.setEnabled(self.auto_advance_checkbox.isChecked())
        self.auto_advance_checkbox.toggled.connect(self.delay_spinbox.setEnabled)
        delay_row.addWidget(delay_label)
        delay_row.addStretch()
        delay_row.addWidget(self.delay_spinbox)
        timing_layout.addLayout(delay_row)

        layout.addWidget(timing_group)

        # Order group
        order_group = QGroupBox("Question Order")
        order_layout = QVBoxLayout()
        order_group.setLayout(order_layout)

        self.fixed_seed_checkbox = QCheckBox("Use a fixed shuffle seed (same order every time)")
        self.fixed_seed_checkbox.setChecked(self._shuffle_seed is not None)
        order_layout.addWidget(self.fixed_seed_checkbox)

        seed_row = QHBoxLayout()
        seed_label = QLabel("Shuffle seed:")
        self.seed_spinbox = QSpinBox()
        self.seed_spinbox.setRange(0, 999_999)
        self.seed_spinbox.setValue(self._shuffle_seed or 0)
        self.seed_spinbox.setEnabled(self.fixed_seed_checkbox.isChecked())
        self.fixed_seed_checkbox.toggled.connect(self.seed_spinbox.setEnabled)
        seed_row.addWidget(seed_label)
        seed_row.addStretch()
        seed_row.addWidget(self.seed_spinbox)
        order_layout.addLayout(seed_row)

        layout.addWidget(order_group)

        # Display group
        display_group = QGroupBox("Display")
        display_layout = QHBoxLayout()
        display_group.setLayout(display_layout)
        font_label = QLabel("Question font size:")
        self.font_spinbox = QSpinBox()
        self.font_spinbox.setRange(10, 32)
        self.font_spinbox.setValue(self._game_font_size)
        self.font_spinbox.setSuffix(" pt")
        display_layout.addWidget(font_label)
        display_layout.addStretch()
        display_layout.addWidget(self.font_spinbox)
        layout.addWidget(display_group)

        # Buttons
        button_row = QHBoxLayout()
        button_row.addStretch()

        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.clicked.connect(self.reject)  # type: ignore[arg-type]
        button_row.addWidget(self.cancel_button)

        self.apply_button = QPushButton("Apply")
        self.apply_button.clicked.connect(self.accept)  # type: ignore[arg-type]
        self.apply_button.setDefault(True)
        button_row.addWidget(self.apply_button)

        layout.addLayout(button_row)

    def get_time_per_question(self) -> int:
        return self.time_spinbox.value()

    def get_auto_advance_delay(self) -> float | None:
        """Delay before moving on after a timeout, or None when disabled."""
        if not self.auto_advance_checkbox.isChecked():
            return None
        return self.delay_spinbox.value()

    def get_shuffle_seed(self) -> int | None:
        if not self.fixed_seed_checkbox.isChecked():
            return None
        return self.seed_spinbox.value()

    def get_game_font_size(self) -> int:
        return self.font_spinbox.value()
