"""CLI search command for grrs"""

import sys

import click

from grrs.errors import SearchRootError
from grrs.models import SearchOptions
from grrs.search import run_search
from grrs.utils import get_bool_env, setup_logging


def should_colorize(no_color: bool, output_json: bool) -> bool:
    """Color only interactive text output, unless disabled by flag or GRRS_NO_COLOR."""
    if no_color or output_json or get_bool_env('GRRS_NO_COLOR'):
        return False
    return sys.stdout.isatty()


def read_stdin_bytes() -> bytes:
    """Read piped stdin undecoded; lines that are not valid UTF-8 are skipped later, as in files."""
    stdin = click.get_binary_stream('stdin')
    if stdin.isatty():
        raise click.UsageError('Provide a PATH, --text, or pipe input on stdin.')
    return stdin.read()


@click.command('search')
@click.argument('pattern', type=str)
@click.argument('path', type=click.Path(), required=False)
@click.option('--text', type=str, default=None, help="Search this string instead of a path")
@click.option('--line-numbers', '-n', 'print_line_numbers', is_flag=True, help="Print line numbers")
@click.option('--time', '-t', 'show_elapsed_time', is_flag=True, help="Print elapsed time after the search")
@click.option(
    '--include-empty', '-e', 'include_empty_matches', is_flag=True, help="Print headers for files without matches"
)
@click.option(
    '--context',
    '-c',
    'match_context',
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Characters to show on each side of a match (0 = whole line)",
)
@click.option(
    '--workers', '-w', type=click.IntRange(min=1), default=None, help="Worker threads (default: GRRS_WORKERS or CPUs)"
)
@click.option('--json', 'output_json', is_flag=True, help="Output one JSON object per file")
@click.option('--no-color', is_flag=True, help="Disable colored output")
@click.option('--debug', is_flag=True, help="Enable debug logging on stderr")
def search_command(
    pattern,
    path,
    text,
    print_line_numbers,
    show_elapsed_time,
    include_empty_matches,
    match_context,
    workers,
    output_json,
    no_color,
    debug,
):
    """
    Search a file, a directory tree or a string for a literal PATTERN.

    Directories are searched recursively; every file is scanned by a pool of
    worker threads and printed as soon as it is done. Without PATH or --text,
    standard input is searched.

    \b
    Examples:
        grrs "error" app.log                 # Lines containing "error"
        grrs "error" /var/log -n             # Recursive, with line numbers
        grrs "error" app.log -c 10           # 10 characters around each match
        grrs "error" /var/log -e             # Also list files without matches
        grrs "are " --text "how are you"     # Search a literal string
        grrs "error" /var/log --json         # One JSON object per file
    """
    if debug:
        setup_logging(debug=True)
        click.echo('Debug mode enabled', err=True)

    if path is not None and text is not None:
        raise click.UsageError('PATH and --text are mutually exclusive.')

    if path is None and text is None:
        text = read_stdin_bytes()

    options = SearchOptions(
        pattern=pattern,
        path=path,
        print_line_numbers=print_line_numbers,
        show_elapsed_time=show_elapsed_time,
        include_empty_matches=include_empty_matches,
        match_context=match_context,
        colorize=should_colorize(no_color, output_json),
        output_json=output_json,
    )

    try:
        run_search(options, sys.stdout, text=text, num_workers=workers)
    except SearchRootError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


if __name__ == '__main__':
    search_command()
