"""Search dispatcher: turns one root into a stream of search jobs

The dispatcher validates the root synchronously (run-fatal errors surface
before any work starts), then walks it on its own thread and submits one job
per unit to the worker pool. Each job reads its unit, runs the match engine and
sends exactly one UnitResult to the result channel.
"""

import logging
import threading
from functools import partial

from grrs import prometheus as prom
from grrs.channel import ResultChannel
from grrs.file_utils import list_directory, read_file_lines, split_text_lines, validate_root
from grrs.match import Highlighter, ansi_highlight, find_matches
from grrs.models import SearchJob, SearchOptions, SearchUnit, UnitKind, UnitResult
from grrs.pool import WorkerPool


logger = logging.getLogger(__name__)


def execute_job(job: SearchJob, highlight: Highlighter | None = None) -> UnitResult:
    """
    Scan one unit and build its result.

    A file that cannot be opened or read fails this unit only: the error is
    returned as part of the UnitResult rather than raised.

    Args:
        job: The unit to scan and the run's options
        highlight: Optional callable wrapping matched spans

    Returns:
        UnitResult with matches in line order, or with error set
    """
    unit = job.unit
    options = job.options

    if unit.kind is UnitKind.LITERAL:
        lines = split_text_lines(unit.value)
    else:
        try:
            lines = read_file_lines(unit.value)
        except OSError as e:
            logger.warning(f'[JOB] Cannot read {unit.value}: {e}')
            return UnitResult(label=unit.label, error=e.strerror or str(e))

    matches = list(find_matches(lines, options.pattern, options.match_context, highlight))
    logger.debug(f'[JOB] {unit.label or "<text>"}: {len(matches)} match(es) in {len(lines)} line(s)')

    return UnitResult(label=unit.label, matches=matches)


class Dispatcher:
    """Walks the search root and submits one job per unit to the pool.

    The root is the literal text when given, otherwise options.path. With
    neither, nothing is dispatched.
    """

    def __init__(
        self,
        options: SearchOptions,
        pool: WorkerPool,
        channel: ResultChannel,
        text: str | bytes | None = None,
    ):
        self.options = options
        self.pool = pool
        self.channel = channel
        self.text = text

        self.highlight = ansi_highlight if options.colorize and not options.output_json else None

        self.units_dispatched = 0
        self.skipped_directories: list[str] = []

        self._root_is_dir: bool | None = None
        self._thread: threading.Thread | None = None
        self._error: Exception | None = None

    def resolve(self) -> None:
        """Validate the root. Raises SearchRootError subclasses for unusable roots."""
        if self.text is None and self.options.path is not None:
            self._root_is_dir = validate_root(self.options.path)
            logger.info(
                f"[DISPATCH] Root '{self.options.path}' is a {'directory' if self._root_is_dir else 'file'}"
            )

    def dispatch(self) -> None:
        """Submit a job for every unit under the root."""
        if self.text is not None:
            self._submit(SearchUnit.literal(self.text))
        elif self.options.path is not None:
            if self._root_is_dir is None:
                self.resolve()
            if self._root_is_dir:
                self._walk(self.options.path)
            else:
                self._submit(SearchUnit.file(self.options.path))

        logger.info(
            f'[DISPATCH] Completed: {self.units_dispatched} unit(s) dispatched, '
            f'{len(self.skipped_directories)} directory(ies) skipped'
        )

    def _walk(self, root: str) -> None:
        pending = [root]

        while pending:
            dirpath = pending.pop()
            try:
                files, subdirs = list_directory(dirpath)
            except OSError as e:
                # Unlistable directories are skipped without surfacing an error
                logger.debug(f'[DISPATCH] Skipping directory {dirpath}: {e}')
                self.skipped_directories.append(dirpath)
                prom.directories_skipped.inc()
                continue

            for filepath in files:
                self._submit(SearchUnit.file(filepath))

            # Reversed so subdirectories are visited in listing order
            pending.extend(reversed(subdirs))

    def _submit(self, unit: SearchUnit) -> None:
        job = SearchJob(unit=unit, options=self.options)
        self.pool.submit(partial(self._run_job, job))
        self.units_dispatched += 1
        prom.units_dispatched.labels(kind=unit.kind.value).inc()

    def _run_job(self, job: SearchJob) -> None:
        try:
            result = execute_job(job, self.highlight)
        except Exception as e:
            logger.error(f'[JOB] Unexpected failure scanning {job.unit.label or "<text>"}: {e}')
            result = UnitResult(label=job.unit.label, error=f'unexpected error: {e}')
        self.channel.send(result)

    def start(self) -> 'Dispatcher':
        """Run dispatch() on a dedicated thread."""
        self._thread = threading.Thread(target=self._run, name='dispatcher', daemon=True)
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            self.dispatch()
        except Exception as e:
            logger.error(f'[DISPATCH] Failed: {e}')
            self._error = e

    def join(self) -> None:
        """Wait for the dispatcher thread; re-raises any error it hit."""
        if self._thread is not None:
            self._thread.join()
        if self._error is not None:
            raise self._error
