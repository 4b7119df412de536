"""rustsig command-line interface."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from rustsig import __version__
from rustsig.config import RenderConfig, find_config, load_config
from rustsig.errors import ParseError
from rustsig.parser import MODES, ParsedItem, parse_as
from rustsig.tokens import Nested, Primitive, Range, Token, TokenStream, Type, Where

_MODE_OPTION = click.option(
    "--mode",
    type=click.Choice(MODES),
    default="type",
    show_default=True,
    help="Which grammar entry point to parse with.",
)


@click.group()
@click.version_option(__version__, prog_name="rustsig")
@click.option("-v", "--verbose", is_flag=True, help="Log parser decisions to stderr.")
def main(verbose: bool) -> None:
    """Parse and highlight Rust type and method signatures."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("text")
@_MODE_OPTION
def parse(text: str, mode: str) -> None:
    """Dump the token tree of TEXT."""
    try:
        parsed = parse_as(mode, text)
    except ParseError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)

    if isinstance(parsed, ParsedItem):
        click.echo(f"name: {parsed.name}")
        click.echo(f"takes_self: {parsed.takes_self}")
        _dump_tokens(parsed.tokens, 0)
    else:
        _dump_tokens(parsed, 0)


@main.command(name="highlight")
@click.argument("text")
@_MODE_OPTION
@click.option(
    "--format", "fmt",
    type=click.Choice(["terminal", "html"]),
    default="terminal",
    show_default=True,
)
@click.option(
    "--style",
    default=None,
    help="Pygments style name. Defaults to the sheet's [render] style.",
)
def highlight_cmd(text: str, mode: str, fmt: str, style: str | None) -> None:
    """Print TEXT syntax-highlighted."""
    from pygments.formatters import HtmlFormatter, Terminal256Formatter
    from pygments.util import ClassNotFound

    from rustsig.highlight import highlight

    if style is None:
        style = _sheet_render().style

    try:
        if fmt == "html":
            formatter = HtmlFormatter(nowrap=True, noclasses=True, style=style)
        else:
            formatter = Terminal256Formatter(style=style)
    except ClassNotFound:
        click.echo(f"error: unknown style {style!r}", err=True)
        raise SystemExit(1)
    click.echo(highlight(text, mode, formatter), nl=False)


def _sheet_render() -> RenderConfig:
    """Render settings of the nearest rustsig.toml, or the defaults."""
    try:
        return load_config(find_config()).render
    except FileNotFoundError:
        return RenderConfig()


@main.command()
@click.argument("path", default=".", type=click.Path(exists=True))
@click.option("--no-color", is_flag=True, help="Disable colored diagnostics.")
def check(path: str, no_color: bool) -> None:
    """Parse every signature in a rustsig.toml cheat sheet."""
    from rustsig.checker import SheetChecker
    from rustsig.errors import DiagnosticRenderer

    try:
        config_path = find_config(Path(path))
    except FileNotFoundError:
        click.echo("error: no rustsig.toml found", err=True)
        raise SystemExit(1)

    try:
        sheet = load_config(config_path)
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)

    checker = SheetChecker(str(config_path))
    count = checker.check(sheet)

    renderer = DiagnosticRenderer(color=sheet.render.color and not no_color)
    for diag in checker.diagnostics:
        click.echo(renderer.render(diag), err=True)

    if checker.has_errors():
        failed = sum(1 for d in checker.diagnostics if d.code.startswith("E"))
        click.echo(f"checked {count} signatures, {failed} FAILED", err=True)
        raise SystemExit(1)
    click.echo(f"checked {count} signatures, no errors")


def _dump_tokens(tokens: TokenStream, depth: int) -> None:
    """Print a readable token tree."""
    for token in tokens:
        _dump_token(token, depth)


def _dump_token(token: Token, depth: int) -> None:
    indent = "  " * depth
    name = type(token).__name__

    if isinstance(token, (Type, Nested)):
        click.echo(f"{indent}{name}")
        _dump_tokens(token.tokens, depth + 1)
    elif isinstance(token, Primitive):
        if token.value:
            click.echo(f"{indent}{name} {token.kind.name} {token.value!r}")
        else:
            click.echo(f"{indent}{name} {token.kind.name}")
    elif isinstance(token, Range):
        click.echo(f"{indent}{name} {token.kind.name}")
    elif isinstance(token, Where):
        click.echo(f"{indent}{name}")
    else:
        click.echo(f"{indent}{name} {token.value!r}")
