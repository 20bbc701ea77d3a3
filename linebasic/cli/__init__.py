"""linebasic CLI Package - one module per command."""

import logging

import click

from linebasic import __version__
from linebasic.cli.run import run_command
from linebasic.cli.repl import repl_command
from linebasic.cli.evaluate import eval_command
from linebasic.cli.listing import list_command


@click.group()
@click.version_option(__version__, prog_name="linebasic")
@click.option('--verbose', '-v', is_flag=True, help='Log interpreter tracing to stderr')
def main(verbose):
    """linebasic - direct-execution BASIC interpreter."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


main.add_command(run_command, "run")
main.add_command(repl_command, "repl")
main.add_command(eval_command, "eval")
main.add_command(list_command, "list")

__all__ = [
    "main",
    "run_command",
    "repl_command",
    "eval_command",
    "list_command",
]
