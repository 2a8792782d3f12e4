"""
Start-up banner: "GIT LOG" in block letters with the version line underneath.
"""

from __future__ import annotations
from typing import Optional

from rich.console import Console
from rich.text import Text

from . import __version__

BANNER_STYLE = "bold #00FFFF"

GLYPHS = {
    "G": [
        " ██████╗ ",
        "██╔════╝ ",
        "██║  ███╗",
        "██║   ██║",
        "╚██████╔╝",
        " ╚═════╝ ",
    ],
    "I": [
        "██╗",
        "██║",
        "██║",
        "██║",
        "██║",
        "╚═╝",
    ],
    "T": [
        "████████╗",
        "╚══██╔══╝",
        "   ██║   ",
        "   ██║   ",
        "   ██║   ",
        "   ╚═╝   ",
    ],
    "L": [
        "██╗     ",
        "██║     ",
        "██║     ",
        "██║     ",
        "███████╗",
        "╚══════╝",
    ],
    "O": [
        " ██████╗ ",
        "██╔═══██╗",
        "██║   ██║",
        "██║   ██║",
        "╚██████╔╝",
        " ╚═════╝ ",
    ],
    " ": ["   "] * 6,
}


def render_block_text(word: str) -> list[str]:
    glyphs = [GLYPHS[ch] for ch in word.upper()]
    return [" ".join(g[row] for g in glyphs).rstrip() for row in range(6)]


def print_banner(console: Optional[Console] = None, title: str = "GIT LOG") -> None:
    if console is None:
        console = Console()
    console.print()
    for line in render_block_text(title):
        # crop, never wrap: wrapped glyph rows fall apart
        console.print(Text(line, style=BANNER_STYLE), no_wrap=True, overflow="crop")
    console.print(f"[grey50]Git Log Tool v{__version__}[/grey50]")
    console.print()
