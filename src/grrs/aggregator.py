"""Result aggregator: the single writer of search output

Results arrive in completion order, which is not deterministic across units.
Each UnitResult is written as one contiguous block (header, then its matches
in line order) so concurrently finishing units never interleave mid-unit.
"""

import logging
import threading
from typing import TextIO

import click

from grrs.channel import ResultChannel
from grrs.models import SearchOptions, SearchSummary, UnitResult


logger = logging.getLogger(__name__)

LINE_NUMBER_WIDTH = 4
PLAIN_HEADER = '==> {label} <=='


def format_header(label: str, colorize: bool) -> str:
    """Format the file header written before a unit's matches.

    Colored output styles the bare path; plain output wraps it in a marker so
    headers stay distinguishable from match lines when piped.
    """
    if colorize:
        return click.style(label, fg='magenta', bold=True)
    return PLAIN_HEADER.format(label=label)


def format_match_line(line_number: int, text: str, print_line_numbers: bool, colorize: bool) -> str:
    """
    Format one match line.

    Args:
        line_number: 1-based source line number
        text: Rendered match text
        print_line_numbers: Prefix the text with the right-aligned line number
        colorize: Style the line number blue

    Returns:
        "<line_number>. <text>" or "<text>"
    """
    if not print_line_numbers:
        return text

    number = f'{line_number:>{LINE_NUMBER_WIDTH}}'
    if colorize:
        number = click.style(number, fg='blue')
    return f'{number}. {text}'


def format_error(label: str | None, message: str, colorize: bool) -> str:
    line = f'error: {label}: {message}' if label else f'error: {message}'
    if colorize:
        return click.style(line, fg='red', bold=True)
    return line


def format_unit(result: UnitResult, options: SearchOptions) -> list[str]:
    """
    Render every output line for one UnitResult.

    Returns an empty list when the unit produces no output (no matches and
    include_empty_matches is off).
    """
    colorize = options.colorize and not options.output_json

    if options.output_json:
        if not result.ok or result.matches or options.include_empty_matches:
            return [result.model_dump_json()]
        return []

    if not result.ok:
        return [format_error(result.label, result.error, colorize)]

    lines = []
    if result.label is not None and (result.matches or options.include_empty_matches):
        lines.append(format_header(result.label, colorize))

    for match in result.matches:
        lines.append(format_match_line(match.line_number, match.text, options.print_line_numbers, colorize))

    return lines


class Aggregator:
    """Drains the result channel and writes each unit to the sink.

    Only the aggregator writes to the sink. It keeps running totals that
    become the run's SearchSummary.
    """

    def __init__(self, channel: ResultChannel, sink: TextIO, options: SearchOptions):
        self.channel = channel
        self.sink = sink
        self.options = options

        self.summary = SearchSummary()
        self._thread: threading.Thread | None = None
        self._error: Exception | None = None

    def run(self) -> SearchSummary:
        """Consume results until the channel is closed."""
        for result in self.channel:
            self.write(result)

        logger.info(
            f'[AGGREGATE] Completed: {self.summary.units} unit(s), {self.summary.matches} match(es), '
            f'{self.summary.errors} error(s)'
        )
        return self.summary

    def write(self, result: UnitResult) -> None:
        self.summary.units += 1
        if result.ok:
            self.summary.matches += len(result.matches)
            if result.matches:
                self.summary.matched_units += 1
        else:
            self.summary.errors += 1

        lines = format_unit(result, self.options)
        if not lines:
            return

        # One write per unit keeps a unit's lines contiguous
        self.sink.write('\n'.join(lines) + '\n')
        self.sink.flush()

    def start(self) -> 'Aggregator':
        self._thread = threading.Thread(target=self._run, name='aggregator', daemon=True)
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            self.run()
        except Exception as e:
            logger.error(f'[AGGREGATE] Failed writing output: {e}')
            self._error = e

    def join(self) -> SearchSummary:
        """Wait for the aggregator thread; re-raises any error it hit."""
        if self._thread is not None:
            self._thread.join()
        if self._error is not None:
            raise self._error
        return self.summary
