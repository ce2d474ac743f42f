"""
Small widgets shared by the library window.
"""

from __future__ import annotations

from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget, QSizePolicy

from playtracker.core.catalog.models import GameEntry
from playtracker.core.views.formatting import format_play_time


class Card(QFrame):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("Card")
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(16, 16, 16, 16)
        self.layout.setSpacing(12)


class PrimaryButton(QPushButton):
    def __init__(self, text: str = "", parent=None):
        super().__init__(text, parent)
        self.setObjectName("PrimaryButton")


class SecondaryButton(QPushButton):
    def __init__(self, text: str = "", parent=None):
        super().__init__(text, parent)
        self.setObjectName("SecondaryButton")


class DangerButton(QPushButton):
    def __init__(self, text: str = "", parent=None):
        super().__init__(text, parent)
        self.setObjectName("DangerButton")


class StatusPill(QLabel):
    """Pill label that switches style between idle and active."""

    def __init__(self, text: str = "", active: bool = False, parent=None):
        super().__init__(text, parent)
        self.set_active(active)

    def set_active(self, active: bool) -> None:
        self.setObjectName("StatusPillActive" if active else "StatusPill")
        # Object name changes only restyle after a re-polish
        self.style().unpolish(self)
        self.style().polish(self)


class GameListItem(QWidget):
    """Row in the library list: display name, play time, running pill."""

    def __init__(self, entry: GameEntry, parent=None):
        super().__init__(parent)
        self.entry_id = entry.id

        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 6, 8, 6)
        layout.setSpacing(12)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)

        text_col = QVBoxLayout()
        text_col.setSpacing(2)
        name_label = QLabel(entry.display_name)
        name_label.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        text_col.addWidget(name_label)
        time_label = QLabel(format_play_time(entry.time))
        time_label.setObjectName("HintLabel")
        text_col.addWidget(time_label)
        layout.addLayout(text_col, 1)

        if entry.running:
            layout.addWidget(StatusPill("Playing", active=True, parent=self))
