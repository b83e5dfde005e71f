"""Main CLI entry point"""

import click

from grrs.__version__ import __version__
from grrs.cli.search import search_command
from grrs.utils import setup_logging


def has_positional_arg(command: click.Command, args: list[str]) -> bool:
    """Check whether args hold a positional argument for command, skipping option values."""
    value_opts = set()
    for param in command.params:
        if isinstance(param, click.Option) and not param.is_flag:
            value_opts.update(param.opts)

    args = iter(args)
    for arg in args:
        if arg == '--':
            return next(args, None) is not None
        if arg.startswith('-') and arg != '-':
            if arg in value_opts:
                next(args, None)
            continue
        return True
    return False


class DefaultCommandGroup(click.Group):
    """Click Group that routes unknown first arguments to the search command

    A first argument naming a command is only taken as that command when a
    positional argument follows it, so `grrs search --text "..."` searches for
    the word "search".
    """

    def parse_args(self, ctx, args):
        if ctx.resilient_parsing:
            return super().parse_args(ctx, args)

        # No arguments, --help or --version: show group help/version
        if not args or args[0] in ('--help', '-h', '--version'):
            return super().parse_args(ctx, args)

        command = self.commands.get(args[0])
        if command is not None and (has_positional_arg(command, args[1:]) or '--help' in args[1:]):
            return super().parse_args(ctx, args)

        return super().parse_args(ctx, ['search'] + args)


@click.group(cls=DefaultCommandGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name='grrs')
@click.pass_context
def cli(ctx):
    """
    grrs - search files, directory trees or text for a literal pattern.

    \b
    Examples:
      grrs "error" /var/log/app.log
      grrs "TODO" src/ -n
      grrs "timeout" /var/log -c 20 -t
      grrs "are " --text "how are you"
      cat notes.txt | grrs "meeting"

    \b
    For more help:
      grrs search --help
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


cli.add_command(search_command, name='search')


def main():
    """Entry point for the CLI"""
    setup_logging()
    cli()


if __name__ == '__main__':
    main()
