"""List command for linebasic CLI."""

import json

import click

from linebasic.errors import BasicError
from linebasic.runtime.interpreter import Interpreter
from linebasic.runtime.executor import ExecutionConfig


@click.command()
@click.argument('program', type=click.File('r'))
@click.option('--json-output', '-j', 'json_output', is_flag=True, help='Output as JSON')
def list_command(program, json_output):
    """Show a program file the way LIST would after loading it."""
    interpreter = Interpreter(ExecutionConfig(abort_on_error=True))
    try:
        interpreter.load(program.read())
    except BasicError as e:
        raise click.ClickException(str(e))

    if json_output:
        output = {
            "lines": [{"number": n, "text": t} for n, t in interpreter.lines.items()],
            "program_bytes": interpreter.arena.program_end,
        }
        click.echo(json.dumps(output, indent=2))
    else:
        for line in interpreter.listing():
            click.echo(line)
