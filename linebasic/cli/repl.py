"""REPL command for linebasic CLI."""

import click

from linebasic.runtime.executor import load_config
from linebasic.runtime.interpreter import Interpreter

READY = "READY."


@click.command()
@click.argument('program', required=False, type=click.Path(exists=True, dir_okay=False))
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True), help='Path to JSON configuration')
@click.option('--memory-size', type=int, help='Arena size in bytes')
@click.option('--stack-size', type=int, help='Bytes of the arena reserved for the control stack')
@click.option('--input', '-i', 'source', type=click.File('r'), default='-', help='Read lines from this file instead of stdin')
def repl_command(program, config_path, memory_size, stack_size, source):
    """
    Interactive interpreter reading lines from stdin or `--input`.

    Numbered lines are stored, anything else runs immediately. Errors are
    reported and the session continues.
    """
    try:
        config = load_config(config_path, memory_size=memory_size, stack_size=stack_size)
    except (ValueError, OSError) as e:
        raise click.ClickException(str(e))
    # Errors are reported per line; the session never aborts.
    config.abort_on_error = False

    interpreter = Interpreter(config)
    if program:
        with open(program) as f:
            for result in interpreter.load(f.read()):
                if not result.success:
                    click.echo("\n".join(result.errors))

    click.echo(READY)
    for line in source:
        line = line.rstrip("\r\n")
        if not line.strip():
            continue
        result = interpreter.submit_line(line)
        if not result.success:
            click.echo("\n".join(result.errors))
            click.echo(READY)
        elif result.stored_line is None:
            click.echo(READY)
