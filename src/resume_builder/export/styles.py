"""Static page geometry and text styles for the PDF renderer (points)."""

from __future__ import annotations

from dataclasses import dataclass

# US Letter
PAGE_WIDTH = 612.0
PAGE_HEIGHT = 792.0
MARGIN = 50.0
FOOTER_RESERVE = 30.0

LINE_HEIGHT_FACTOR = 1.156  # Helvetica ascender - descender
LINE_GAP = 5.0
LOOKAHEAD_LINES = 3

BULLET_MARKER = "-"
BULLET_INDENT = 10.0

FONT_FAMILY = "Helvetica"


@dataclass(frozen=True)
class StyleRule:
    font_weight: str  # "normal" | "bold"
    size_pt: float
    color_hex: str
    paragraph_gap_pt: float = 0.0
    pre_gap_pt: float | None = None

    @property
    def font_style(self) -> str:
        return "B" if self.font_weight == "bold" else ""

    @property
    def rgb(self) -> tuple[int, int, int]:
        h = self.color_hex.lstrip("#")
        return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)

    @property
    def line_height(self) -> float:
        return self.size_pt * LINE_HEIGHT_FACTOR


STYLES: dict[str, StyleRule] = {
    "h1": StyleRule("bold", 24, "#2c3e50", paragraph_gap_pt=4),
    "h2": StyleRule("bold", 14, "#2980b9", paragraph_gap_pt=8, pre_gap_pt=10),
    "h3": StyleRule("bold", 12, "#3498db", paragraph_gap_pt=4),
    "body": StyleRule("normal", 12, "#333333", paragraph_gap_pt=5),
    "footer": StyleRule("normal", 10, "#666666"),
    "link": StyleRule("normal", 12, "#2c3e50", paragraph_gap_pt=5),
}
