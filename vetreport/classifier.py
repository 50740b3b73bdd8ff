"""
Structural classification of generated free text.

Each logical line is tagged with a role by an ordered list of heuristic rules;
the first rule that matches wins. Classification is a pure function of the
line.

License: MIT
"""

import enum
import re
from typing import Callable, List, NamedTuple, Optional, Tuple

SUBTITLE_MAX_LENGTH = 50

# Uppercase letters (accented Latin capitals included) and spaces, optional trailing colon
TITLE_CAPS_PATTERN = re.compile(r"^[A-ZÀ-ÖØ-Þ\s]+:?$")
TITLE_BOLD_PATTERN = re.compile(r"^\*\*.*\*\*$")
BULLET_PATTERN = re.compile(r"^[-*•]\s+")
NUMBERED_PATTERN = re.compile(r"^\d+[.)]\s+")


class LineRole(str, enum.Enum):
    TITLE = "title"
    SUBTITLE = "subtitle"
    LIST_ITEM = "list_item"
    CONTENT = "content"


class ClassifiedLine(NamedTuple):
    role: LineRole
    text: str


Rule = Callable[[str], Optional[str]]


def _title(line: str) -> Optional[str]:
    if TITLE_CAPS_PATTERN.match(line) or TITLE_BOLD_PATTERN.match(line):
        return re.sub(r":$", "", line.replace("**", "")).strip()
    return None


def _subtitle(line: str) -> Optional[str]:
    if line.endswith(":") and len(line) < SUBTITLE_MAX_LENGTH:
        return line
    return None


def _list_item(line: str) -> Optional[str]:
    for pattern in (BULLET_PATTERN, NUMBERED_PATTERN):
        if pattern.match(line):
            return pattern.sub("", line, count=1)
    return None


def _content(line: str) -> Optional[str]:
    return line


# Evaluated in order, first match wins
RULES: Tuple[Tuple[LineRole, Rule], ...] = (
    (LineRole.TITLE, _title),
    (LineRole.SUBTITLE, _subtitle),
    (LineRole.LIST_ITEM, _list_item),
    (LineRole.CONTENT, _content),
)


def classify_line(line: str) -> ClassifiedLine:
    """
    Tag a single line with its structural role.

    Args:
        line: One line of generated text (no newlines)

    Returns:
        ClassifiedLine with the role and the text to render (markers stripped)
    """
    line = line.strip()
    for role, rule in RULES:
        text = rule(line)
        if text is not None:
            return ClassifiedLine(role, text)
    return ClassifiedLine(LineRole.CONTENT, line)


def classify_text(content: str) -> List[ClassifiedLine]:
    """Classify every non-blank line of a generated document."""
    return [classify_line(line) for line in content.split("\n") if line.strip()]
