"""
Shared Click option decorators for vatcentral command groups.

Each decorator factory wraps a single Click option so it can be reused
across multiple commands without repeating the option definition.
"""

from pathlib import Path

import click


def catalog_option(func):
    """--catalog/-c: path to a scenario catalog JSON file."""
    return click.option(
        "--catalog",
        "-c",
        "catalog_file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="Path to a scenario catalog JSON file (default: bundled scenarios).",
    )(func)


def tolerance_option(func):
    """--tolerance/-t: numeric tolerance for balance checks."""
    return click.option(
        "--tolerance",
        "-t",
        type=float,
        default=0.01,
        help="Numeric tolerance for balance checks (default: 0.01).",
    )(func)


def format_option(choices: tuple = ("text", "json", "csv")):
    """--format: output format selector."""
    def decorator(func):
        return click.option(
            "--format",
            type=click.Choice(list(choices), case_sensitive=False),
            default=choices[0],
            help=f"Output format (default: {choices[0]}).",
        )(func)
    return decorator
