"""Run command for linebasic CLI."""

import logging
import sys
from pathlib import Path

import click

from linebasic.errors import BasicError
from linebasic.runtime.executor import load_config
from linebasic.runtime.interpreter import Interpreter

logger = logging.getLogger(__name__)


@click.command()
@click.argument('program', type=click.Path(exists=True, dir_okay=False))
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True), help='Path to JSON configuration')
@click.option('--memory-size', type=int, help='Arena size in bytes')
@click.option('--stack-size', type=int, help='Bytes of the arena reserved for the control stack')
@click.option('--max-steps', type=int, help='Abort after this many statements (0 = unlimited)')
def run_command(program, config_path, memory_size, stack_size, max_steps):
    """Load a BASIC program file and RUN it."""
    try:
        config = load_config(config_path, memory_size=memory_size,
                             stack_size=stack_size, max_steps=max_steps,
                             abort_on_error=True)
    except (ValueError, OSError) as e:
        raise click.ClickException(str(e))

    interpreter = Interpreter(config)
    source = Path(program).read_text()

    try:
        interpreter.load(source)
        interpreter.run()
    except BasicError as e:
        sys.stdout.flush()
        click.echo(f"--- ERROR: {e}", err=True)
        logger.debug("Interpreter aborted", exc_info=True)
        sys.exit(1)
