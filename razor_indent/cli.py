"""
Reindents a Razor document.
Prints the result to stdout, or rewrites the file in place with --in-place.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from .config import ConfigError, build_config
from .filesystem import read_document, resolve_document_path, write_document
from .formatter import format_text

__all__ = ["cli"]


@click.command()
@click.version_option(package_name="razor-indent")
@click.option("--indent-size", type=int, help="Columns per indentation level")
@click.option(
    "--adjust-text-blocks/--no-adjust-text-blocks",
    default=None,
    help="Reindent the contents of <text>, <script> and <style> blocks",
)
@click.option("--in-place", "-i", is_flag=True, help="Rewrite the file instead of printing it")
@click.option("--check", is_flag=True, help="Exit with status 1 if the file would change")
@click.option("--verbose", "-v", is_flag=True, help="Print the change log to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    indent_size: int | None = None,
    adjust_text_blocks: bool | None = None,
    in_place: bool = False,
    check: bool = False,
    verbose: bool = False,
):
    """
    Entry point for reindenting a Razor, HTML, or Blazor document.

    Args:
        filepath: Path to the document to process.
        indent_size: Override for the indentation width.
        adjust_text_blocks: Override for reindenting block contents.
        in_place: Rewrite the file atomically instead of printing it.
        check: Report whether the file would change without writing it.
        verbose: Enable debug logging and print the change log.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path or configuration is invalid.
        click.ClickException: If reading, validating, or writing the document fails.

    Examples:
        razor-indent Views/Home/Index.cshtml --indent-size 4 --in-place
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    base_dir = Path.cwd().resolve()
    try:
        filepath = resolve_document_path(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    try:
        config = build_config(
            filepath.parent,
            indent_size=indent_size,
            adjust_text_blocks=adjust_text_blocks,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        document = read_document(filepath, config.max_file_size)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    result = format_text(document.text, config.to_options())
    if result.error is not None:
        raise click.ClickException(f"{filepath}: {result.error}")

    if verbose:
        for change in result.changes:
            click.echo(str(change), err=True)

    changed = result.output != document.text
    if check:
        if changed:
            click.echo(f"{filepath} would be reindented", err=True)
            raise SystemExit(1)
        return

    if not in_place:
        click.echo(result.output, nl=False)
        return

    if not changed:
        return
    if not document.decoded.lossless:
        raise click.ClickException(
            f"{filepath} could not be decoded without loss ({document.decoded.encoding}); "
            "refusing to overwrite."
        )

    try:
        write_document(
            document, result.output, warn=lambda message: click.echo(message, err=True)
        )
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
