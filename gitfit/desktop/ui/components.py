"""
Small reusable widgets for the prompt window.
"""

from __future__ import annotations

from PySide6.QtWidgets import QFrame, QLabel, QPushButton, QVBoxLayout

from .theme import CATEGORY_COLORS, rgba


class Card(QFrame):
    """Card container with rounded corners."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("Card")
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(16, 16, 16, 16)
        self.layout.setSpacing(8)


class PrimaryButton(QPushButton):
    def __init__(self, text: str = "", parent=None):
        super().__init__(text, parent)
        self.setObjectName("PrimaryButton")


class SecondaryButton(QPushButton):
    def __init__(self, text: str = "", parent=None):
        super().__init__(text, parent)
        self.setObjectName("SecondaryButton")


class CategoryChip(QLabel):
    """Colored chip naming an exercise category."""

    def __init__(self, category: str = "", parent=None):
        super().__init__(parent)
        self.setObjectName("Chip")
        self.set_category(category)

    def set_category(self, category: str) -> None:
        self.setText(category.upper())
        color = CATEGORY_COLORS.get(category, "#8E8E93")
        self.setStyleSheet(
            f"""
            QLabel#Chip {{
                background-color: {rgba(color, 0.15)};
                color: {color};
                border-radius: 10px;
                padding: 3px 8px;
                font-size: 11px;
                font-weight: 500;
            }}
            """
        )
