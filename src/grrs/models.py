"""Pydantic models for the search pipeline"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SearchOptions(BaseModel):
    """Options for a single run, shared read-only by every job.

    Attributes:
        pattern: Literal substring to search for (empty matches every line)
        path: File or directory root, or None when searching a literal string
        print_line_numbers: Prefix each match with its 1-based line number
        show_elapsed_time: Print the run's wall-clock duration after all output
        include_empty_matches: Print file headers for units without matches
        match_context: Characters shown on each side of the match (0 = full line)
        colorize: Apply ANSI styling to headers, line numbers and matches
        output_json: Write one JSON object per unit instead of text lines
    """

    model_config = ConfigDict(frozen=True)

    pattern: str = Field(..., description='Literal pattern to search for')
    path: str | None = Field(None, description='Root file or directory')
    print_line_numbers: bool = Field(False, description='Print 1-based line numbers')
    show_elapsed_time: bool = Field(False, description='Print elapsed time after the run')
    include_empty_matches: bool = Field(False, description='Print headers for files without matches')
    match_context: int = Field(0, ge=0, description='Context characters around a match (0 = unbounded)')
    colorize: bool = Field(False, description='Apply ANSI styling')
    output_json: bool = Field(False, description='Emit NDJSON instead of text')


class UnitKind(str, Enum):
    FILE = 'file'
    LITERAL = 'literal'


class SearchUnit(BaseModel):
    """One independently schedulable scan target: a file path or a literal string.

    Literal values may be raw bytes (piped stdin); they are decoded line by line
    like file contents, so an undecodable line is skipped instead of failing the unit.
    """

    model_config = ConfigDict(frozen=True)

    kind: UnitKind
    value: str | bytes

    @classmethod
    def file(cls, path: str) -> 'SearchUnit':
        return cls(kind=UnitKind.FILE, value=path)

    @classmethod
    def literal(cls, text: str | bytes) -> 'SearchUnit':
        return cls(kind=UnitKind.LITERAL, value=text)

    @property
    def label(self) -> str | None:
        """Display name for the unit; literal input has none."""
        if self.kind is UnitKind.FILE:
            return self.value
        return None


class SearchJob(BaseModel):
    """A unit paired with the run's shared options"""

    model_config = ConfigDict(frozen=True)

    unit: SearchUnit
    options: SearchOptions


class MatchRecord(BaseModel):
    """A matched line, already clipped and highlighted for display

    Attributes:
        line_index: Source line index (0-based)
        text: Rendered line text
    """

    model_config = ConfigDict(frozen=True)

    line_index: int = Field(..., ge=0, json_schema_extra={'example': 4}, description='Source line index (0-based)')
    text: str = Field(..., json_schema_extra={'example': '...are you...'}, description='Rendered line text')

    @property
    def line_number(self) -> int:
        return self.line_index + 1


class UnitResult(BaseModel):
    """Result of scanning one unit. Produced exactly once per unit, even without matches.

    Attributes:
        label: Display name (file path), None for literal input
        matches: Matches in ascending line order
        error: Message when the unit could not be read; matches is empty then
    """

    label: str | None = Field(
        None, json_schema_extra={'example': '/var/log/app.log'}, description='Display name of the unit'
    )
    matches: list[MatchRecord] = Field(default_factory=list, description='Matches in line order')
    error: str | None = Field(
        None, json_schema_extra={'example': 'Permission denied'}, description='Unit-level read failure'
    )

    @property
    def ok(self) -> bool:
        return self.error is None


class SearchSummary(BaseModel):
    """Totals for a completed run"""

    units: int = Field(default=0, description='Unit results received')
    matched_units: int = Field(default=0, description='Units with at least one match')
    matches: int = Field(default=0, description='Total matched lines')
    errors: int = Field(default=0, description='Units that failed to read')
    skipped_directories: int = Field(default=0, description='Directories that could not be listed')
    elapsed: float = Field(default=0.0, description='Wall-clock seconds from dispatch start to join')

    def to_cli(self, colorize: bool = False) -> str:
        """Format the elapsed-time line printed after the aggregator drains"""
        YELLOW = '\033[33m'
        RESET = '\033[0m'

        if colorize:
            return f'Completed in: {YELLOW}{self.elapsed:.3f}s{RESET}'
        return f'Completed in: {self.elapsed:.3f}s'
