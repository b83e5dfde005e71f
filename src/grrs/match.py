"""Literal line matching and context-window rendering

This module is the pure part of the pipeline: it has no shared state and never
performs I/O. Workers call find_matches() on the lines of one unit and collect
the resulting MatchRecords into a UnitResult.
"""

import logging
from collections.abc import Callable, Iterator, Sequence

import click

from grrs.models import MatchRecord
from grrs.utils import ELLIPSIS


logger = logging.getLogger(__name__)

Highlighter = Callable[[str], str]


def decode_line(raw: str | bytes) -> str | None:
    """
    Turn a raw line into text without its line terminator ('\\n' or '\\r\\n').

    Returns None for byte lines that are not valid UTF-8; callers skip those lines.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError:
            return None
    if raw.endswith('\n'):
        raw = raw[:-1]
    if raw.endswith('\r'):
        raw = raw[:-1]
    return raw


def ansi_highlight(text: str) -> str:
    """Highlight a matched span in bold bright red"""
    return click.style(text, fg='bright_red', bold=True)


def render_match(
    line: str,
    pattern: str,
    match_context: int = 0,
    highlight: Highlighter | None = None,
) -> str | None:
    """
    Render the first occurrence of pattern in line, clipped to a context window.

    The window keeps match_context characters on each side of the match. A side
    that had to be clipped gets an ellipsis marker. match_context=0 means the
    window is unbounded and the full line is rendered.

    Args:
        line: Line text without terminator
        pattern: Literal pattern
        match_context: Characters to keep on each side of the match (0 = unbounded)
        highlight: Optional callable wrapping the matched span (e.g. ANSI styling)

    Returns:
        Rendered text, or None if the line does not contain the pattern

    Example:
        >>> render_match('abcXYZdef', 'XYZ', match_context=1)
        '...cXYZd...'
    """
    m_start = line.find(pattern)
    if m_start < 0:
        return None

    p_len = len(pattern)
    l_len = len(line)
    context = match_context if match_context > 0 else l_len

    m_end = m_start + p_len

    context_start = m_start - context
    if context_start > 0:
        prefix = ELLIPSIS + line[context_start:m_start]
    else:
        prefix = line[:m_start]

    context_end = m_end + context
    if context_end >= l_len:
        suffix = line[m_end:]
    else:
        suffix = line[m_end:context_end] + ELLIPSIS

    matched = line[m_start:m_end]
    if highlight is not None and matched:
        matched = highlight(matched)

    return prefix + matched + suffix


class LineScan:
    """Lazy, restartable scan of a line sequence for a literal pattern.

    Each iteration walks the lines from the start and yields a MatchRecord per
    matching line, in source order. Lines that fail to decode are skipped but
    still advance the line index.
    """

    def __init__(
        self,
        lines: Sequence[str | bytes],
        pattern: str,
        match_context: int = 0,
        highlight: Highlighter | None = None,
    ):
        self.lines = lines
        self.pattern = pattern
        self.match_context = match_context
        self.highlight = highlight

    def __iter__(self) -> Iterator[MatchRecord]:
        for idx, raw in enumerate(self.lines):
            line = decode_line(raw)
            if line is None:
                logger.debug(f'[MATCH] Skipping undecodable line {idx + 1}')
                continue

            text = render_match(line, self.pattern, self.match_context, self.highlight)
            if text is not None:
                yield MatchRecord(line_index=idx, text=text)


def find_matches(
    lines: Sequence[str | bytes],
    pattern: str,
    match_context: int = 0,
    highlight: Highlighter | None = None,
) -> LineScan:
    """Scan lines for pattern; see LineScan."""
    return LineScan(lines, pattern, match_context, highlight)
