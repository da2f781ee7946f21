"""Turn free-form outfit advice into labeled rows.

Each non-blank line becomes one ``AdviceItem``. Lines are tried against an
ordered chain of matchers; the first match wins and a line that matches
nothing is kept as unlabeled text, so parsing never fails and never drops
content.
"""

import re
from collections.abc import Callable, Sequence

from ..models.advice import AdviceItem

AdviceMatcher = Callable[[str], AdviceItem | None]

BULLET_PATTERN = re.compile(r"^[-*]\s+")

# "**Base Layer**: thermal shirt"
EMPHASIS_PATTERN = re.compile(r"^\*\*(.+?)\*\*:\s*(.+)$")
# "**Base Layer:** thermal shirt"
EMPHASIS_INNER_COLON_PATTERN = re.compile(r"^\*\*([^*]+?):\*\*\s*(.+)$")
# "Base Layer: thermal shirt"
PLAIN_LABEL_PATTERN = re.compile(r"^([^:]+):\s*(.+)$")


def regex_matcher(pattern: re.Pattern[str]) -> AdviceMatcher:
    """Build a matcher from a two-group (label, text) pattern."""

    def match(line: str) -> AdviceItem | None:
        found = pattern.match(line)
        if not found:
            return None
        label, text = found.group(1).strip(), found.group(2).strip()
        if not label or not text:
            return None
        return AdviceItem(label=label, text=text)

    return match


def unlabeled(line: str) -> AdviceItem:
    return AdviceItem(label="", text=line)


DEFAULT_MATCHERS: tuple[AdviceMatcher, ...] = (
    regex_matcher(EMPHASIS_PATTERN),
    regex_matcher(EMPHASIS_INNER_COLON_PATTERN),
    regex_matcher(PLAIN_LABEL_PATTERN),
)


def clean_lines(raw_text: str | None) -> list[str]:
    """Split into trimmed, non-empty lines with bullet markers removed."""
    if not raw_text:
        return []
    lines = []
    for line in str(raw_text).split("\n"):
        line = line.strip()
        if not line:
            continue
        line = BULLET_PATTERN.sub("", line, count=1).strip()
        if line:
            lines.append(line)
    return lines


def parse_line(line: str, matchers: Sequence[AdviceMatcher] = DEFAULT_MATCHERS) -> AdviceItem:
    """Parse one cleaned line, falling back to unlabeled text."""
    for matcher in matchers:
        item = matcher(line)
        if item is not None:
            return item
    return unlabeled(line)


def parse_advice(
    raw_text: str | None, matchers: Sequence[AdviceMatcher] = DEFAULT_MATCHERS
) -> list[AdviceItem]:
    """Parse advice text into items, preserving line order."""
    return [parse_line(line, matchers) for line in clean_lines(raw_text)]
