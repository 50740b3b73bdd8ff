"""
Text wrapping by measured glyph width.

License: MIT
"""

from typing import Callable, List

Measure = Callable[[str], float]


def wrap_text(text: str, max_width: float, measure: Measure) -> List[str]:
    """
    Split text into lines no wider than max_width.

    Existing newlines are kept as paragraph breaks (an empty paragraph becomes
    an empty line). Within a paragraph words are accumulated greedily; a word
    that is wider than max_width on its own is emitted alone on its line.

    Args:
        text: Text to wrap
        max_width: Maximum line width in points
        measure: Width of a string in points, in the target font and size

    Returns:
        Ordered list of lines
    """
    lines: List[str] = []

    for paragraph in text.split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if measure(candidate) <= max_width:
                current = candidate
            elif current:
                lines.append(current)
                current = word
            else:
                # Unbreakable word wider than the line
                lines.append(word)

        if current:
            lines.append(current)

    return lines


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())
