"""Search pipeline: dispatcher -> worker pool -> aggregator

run_search() wires the three stages together, each on its own thread(s), and
blocks until the run is complete. Completion means the dispatcher has stopped
submitting, every queued job has been executed and the aggregator has drained
the closed result channel.
"""

import logging
import sys
import time
from typing import TextIO

from grrs.aggregator import Aggregator
from grrs.channel import ResultChannel
from grrs.dispatcher import Dispatcher
from grrs.models import SearchOptions, SearchSummary
from grrs.pool import WorkerPool


logger = logging.getLogger(__name__)


def run_search(
    options: SearchOptions,
    sink: TextIO | None = None,
    text: str | bytes | None = None,
    num_workers: int | None = None,
) -> SearchSummary:
    """
    Search options.path (or the literal text) for options.pattern and write results to sink.

    Args:
        options: Shared run options
        sink: Writable text stream for results (default: stdout)
        text: Literal string (or raw bytes, e.g. from stdin) to search instead of options.path
        num_workers: Worker pool size (default: GRRS_WORKERS or CPU count)

    Returns:
        SearchSummary with run totals and elapsed time

    Raises:
        SearchRootError: the root cannot be used; raised before any job is dispatched
    """
    if sink is None:
        sink = sys.stdout

    channel = ResultChannel()
    pool = WorkerPool('search', num_workers)
    dispatcher = Dispatcher(options, pool, channel, text=text)

    # Run-fatal root errors propagate from here, before any thread is started
    dispatcher.resolve()

    aggregator = Aggregator(channel, sink, options)

    start_time = time.time()
    logger.info(f'[SEARCH] Starting search for {options.pattern!r} with {pool.num_workers} worker(s)')

    pool.start()
    aggregator.start()
    dispatcher.start()

    try:
        dispatcher.join()
    finally:
        # STOP messages queue behind every submitted job, so this drains the pool
        pool.stop()
        channel.close()
        summary = aggregator.join()

    summary.skipped_directories = len(dispatcher.skipped_directories)
    summary.elapsed = time.time() - start_time

    logger.info(
        f'[SEARCH] Completed: {summary.units} unit(s), {summary.matches} match(es) in {summary.elapsed:.3f}s'
    )

    if options.show_elapsed_time:
        if options.output_json:
            sink.write(summary.model_dump_json() + '\n')
        else:
            sink.write(summary.to_cli(colorize=options.colorize) + '\n')
        sink.flush()

    return summary
