"""Eval command for linebasic CLI."""

import json
import sys

import click

from linebasic.errors import BasicError
from linebasic.runtime.interpreter import Interpreter


@click.command()
@click.argument('expressions', nargs=-1, required=True)
@click.option('--json-output', '-j', 'json_output', is_flag=True, help='Output as JSON')
def eval_command(expressions, json_output):
    """Evaluate numeric expressions and print `EXPR = VALUE`."""
    interpreter = Interpreter()
    results = []
    failed = False

    for expression in expressions:
        try:
            value = interpreter.evaluate_numeric(expression)
            results.append({"expression": expression, "value": value, "error": None})
        except BasicError as e:
            failed = True
            results.append({"expression": expression, "value": None, "error": str(e)})

    if json_output:
        click.echo(json.dumps(results, indent=2))
    else:
        for item in results:
            if item["error"] is None:
                click.echo(f"{item['expression']} = {item['value']:f}")
            else:
                click.echo(f"{item['expression']}: {item['error']}", err=True)

    if failed:
        sys.exit(1)
