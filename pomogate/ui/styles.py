"""QSS stylesheet built from the configured palette and font."""

from __future__ import annotations

from ..settings import Settings

BORDER_RADIUS = 10
BORDER_WIDTH = 4


def palette_from_settings(settings: Settings) -> dict[str, str]:
    return {
        "bg": settings.background,
        "text": settings.text,
        "accent": settings.accent,
        "danger": settings.danger,
    }


def build_stylesheet(settings: Settings) -> str:
    p = palette_from_settings(settings)
    font = settings.font_family
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-family: "{font}";
        font-size: 28px;
    }}

    QLabel#timerLabel {{
        color: {p['accent']};
        font-size: 120px;
        font-weight: 700;
    }}

    QLabel#timerLabel[overtime="true"] {{
        color: {p['danger']};
    }}

    QLabel#titleLabel {{
        font-size: 64px;
        font-weight: 700;
    }}

    QLabel#errorLabel {{
        color: {p['danger']};
        font-size: 40px;
    }}

    QLabel#causeLabel {{
        padding-left: 60px;
    }}

    QLabel#hintLabel {{
        color: {p['text']};
        font-size: 18px;
    }}

    /* ── inputs ─────────────────────────────────── */
    QLineEdit {{
        border: {BORDER_WIDTH}px solid {p['text']};
        border-radius: {BORDER_RADIUS}px;
        padding: 8px 16px;
    }}

    QLineEdit:focus {{
        border-color: {p['accent']};
    }}

    QCheckBox::indicator {{
        width: 28px;
        height: 28px;
        border: {BORDER_WIDTH}px solid {p['accent']};
        border-radius: {BORDER_RADIUS}px;
    }}

    QCheckBox::indicator:checked {{
        background-color: {p['accent']};
    }}

    /* ── buttons ────────────────────────────────── */
    QPushButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
        border-radius: {BORDER_RADIUS}px;
        padding: 10px 24px;
        font-weight: 700;
    }}

    QPushButton:pressed {{
        background-color: {p['text']};
    }}
    """
