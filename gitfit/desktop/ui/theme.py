"""
Theme for the floating prompt: dark surfaces with neon category accents.
"""

from __future__ import annotations

from typing import Dict

SPACING = {
    "xs": "4px",
    "sm": "8px",
    "md": "12px",
    "lg": "16px",
    "xl": "24px",
}

TYPOGRAPHY = {
    "font_family": "SF Mono, Menlo, monospace",
    "font_size_xs": "11px",
    "font_size_sm": "13px",
    "font_size_base": "15px",
    "font_size_xl": "22px",
    "font_size_timer": "40px",
    "font_weight_normal": "400",
    "font_weight_medium": "500",
    "font_weight_bold": "700",
}

NEON = {
    "cyan": "#00F0FF",
    "magenta": "#FF2BD6",
    "purple": "#A259FF",
    "green": "#34C759",
}

CATEGORY_COLORS: Dict[str, str] = {
    "Stretch": NEON["cyan"],
    "Strength": NEON["magenta"],
    "Eye Care": NEON["green"],
    "Posture": NEON["purple"],
}

COLORS = {
    "background": "#0D0D12",
    "surface": "#1C1C24",
    "text_primary": "#FFFFFF",
    "text_secondary": "#98989D",
    "border": "#38383A",
}


def rgba(hex_color: str, alpha: float) -> str:
    """Convert hex color to rgba string."""
    hex_color = hex_color.lstrip("#")
    r, g, b = int(hex_color[0:2], 16), int(hex_color[2:4], 16), int(hex_color[4:6], 16)
    return f"rgba({r}, {g}, {b}, {alpha})"


class Theme:
    def __init__(self) -> None:
        self.colors = COLORS

    def get_stylesheet(self) -> str:
        colors = self.colors
        font_family = TYPOGRAPHY["font_family"]

        return f"""
        QWidget#PromptWindow {{
            background-color: {colors["background"]};
            color: {colors["text_primary"]};
            border: 1px solid {rgba(NEON["cyan"], 0.4)};
            border-radius: 16px;
        }}

        QLabel#TitleLabel {{
            font-family: {font_family};
            font-size: {TYPOGRAPHY["font_size_xl"]};
            font-weight: {TYPOGRAPHY["font_weight_bold"]};
            color: {colors["text_primary"]};
        }}

        QLabel#BodyLabel {{
            font-family: {font_family};
            font-size: {TYPOGRAPHY["font_size_base"]};
            color: {colors["text_primary"]};
        }}

        QLabel#HintLabel {{
            font-family: {font_family};
            font-size: {TYPOGRAPHY["font_size_sm"]};
            color: {colors["text_secondary"]};
        }}

        QLabel#TimerLabel {{
            font-family: {font_family};
            font-size: {TYPOGRAPHY["font_size_timer"]};
            font-weight: {TYPOGRAPHY["font_weight_bold"]};
            color: {NEON["cyan"]};
        }}

        QFrame#Card {{
            background-color: {colors["surface"]};
            border-radius: 12px;
            border: 1px solid {colors["border"]};
        }}

        QPushButton#PrimaryButton {{
            background-color: {NEON["magenta"]};
            color: #FFFFFF;
            border: none;
            border-radius: 16px;
            padding: {SPACING["sm"]} {SPACING["lg"]};
            font-family: {font_family};
            font-weight: {TYPOGRAPHY["font_weight_medium"]};
            min-height: 32px;
        }}

        QPushButton#SecondaryButton {{
            background-color: transparent;
            color: {NEON["cyan"]};
            border: 1px solid {rgba(NEON["cyan"], 0.5)};
            border-radius: 16px;
            padding: {SPACING["sm"]} {SPACING["lg"]};
            font-family: {font_family};
            min-height: 32px;
        }}
        """
