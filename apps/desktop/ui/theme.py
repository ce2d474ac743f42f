"""
Stylesheet for the library window: a dark shelf with one accent colour,
and a light variant.
"""

from __future__ import annotations

from typing import Literal

SPACING = {
    "xs": "4px",
    "sm": "8px",
    "md": "12px",
    "lg": "16px",
    "xl": "24px",
}

FONT_FAMILY = "Inter, Segoe UI, sans-serif"

ACCENT = "#7C5CFF"
RUNNING = "#34C759"
DANGER = "#FF453A"

DARK_COLORS = {
    "background": "#12131C",
    "surface": "#1A1C2C",
    "surface_secondary": "#242741",
    "text_primary": "#FFFFFF",
    "text_secondary": "#A0A3BD",
    "border": "#2E3150",
}

LIGHT_COLORS = {
    "background": "#F3F4F8",
    "surface": "#FFFFFF",
    "surface_secondary": "#ECEDF4",
    "text_primary": "#12131C",
    "text_secondary": "#5C5F7A",
    "border": "#D9DBE7",
}

ThemeMode = Literal["light", "dark"]


class Theme:
    def __init__(self, mode: ThemeMode = "dark"):
        self.mode = mode
        self.colors = LIGHT_COLORS if mode == "light" else DARK_COLORS

    def get_stylesheet(self) -> str:
        c = self.colors
        return f"""
        QMainWindow, QDialog {{
            background-color: {c["background"]};
            color: {c["text_primary"]};
            font-family: {FONT_FAMILY};
        }}

        QLabel {{ color: {c["text_primary"]}; font-size: 14px; }}
        QLabel#TitleLabel {{ font-size: 26px; font-weight: 700; }}
        QLabel#SectionLabel {{ font-size: 20px; font-weight: 600; }}
        QLabel#HintLabel {{ color: {c["text_secondary"]}; font-size: 12px; }}
        QLabel#WarningLabel {{ color: {DANGER}; font-size: 12px; }}

        QFrame#Card {{
            background-color: {c["surface"]};
            border: 1px solid {c["border"]};
            border-radius: 12px;
        }}

        QPushButton#PrimaryButton {{
            background-color: {ACCENT};
            color: #FFFFFF;
            border: none;
            border-radius: 8px;
            padding: {SPACING["sm"]} {SPACING["xl"]};
            font-weight: 600;
        }}
        QPushButton#PrimaryButton:disabled {{
            background-color: {c["border"]};
            color: {c["text_secondary"]};
        }}

        QPushButton#SecondaryButton {{
            background-color: {c["surface_secondary"]};
            color: {c["text_primary"]};
            border: 1px solid {c["border"]};
            border-radius: 8px;
            padding: {SPACING["sm"]} {SPACING["lg"]};
        }}
        QPushButton#DangerButton {{
            background-color: {self._rgba(DANGER, 0.15)};
            color: {DANGER};
            border: none;
            border-radius: 8px;
            padding: {SPACING["sm"]} {SPACING["lg"]};
        }}

        QLineEdit, QComboBox {{
            background-color: {c["surface"]};
            color: {c["text_primary"]};
            border: 1px solid {c["border"]};
            border-radius: 8px;
            padding: {SPACING["xs"]} {SPACING["md"]};
            min-height: 32px;
        }}
        QLineEdit:focus, QComboBox:focus {{ border-color: {ACCENT}; }}

        QListWidget {{
            background-color: transparent;
            border: none;
            outline: none;
        }}
        QListWidget::item:selected {{
            background-color: {self._rgba(ACCENT, 0.2)};
            border-radius: 8px;
        }}

        QLabel#StatusPill {{
            background-color: {c["surface_secondary"]};
            color: {c["text_secondary"]};
            border-radius: 10px;
            padding: 2px {SPACING["md"]};
            font-size: 12px;
        }}
        QLabel#StatusPillActive {{
            background-color: {self._rgba(RUNNING, 0.15)};
            color: {RUNNING};
            border-radius: 10px;
            padding: 2px {SPACING["md"]};
            font-size: 12px;
        }}
        """

    def _rgba(self, hex_color: str, alpha: float) -> str:
        hex_color = hex_color.lstrip("#")
        r, g, b = int(hex_color[0:2], 16), int(hex_color[2:4], 16), int(hex_color[4:6], 16)
        return f"rgba({r}, {g}, {b}, {alpha})"

    def toggle_mode(self) -> None:
        self.mode = "dark" if self.mode == "light" else "light"
        self.colors = LIGHT_COLORS if self.mode == "light" else DARK_COLORS
