import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .debug import check_layout_invariants, describe_layout
from .export import EXPORT_FORMATS, ExportError
from .generator import StructogramGenerator
from .parser import ParseError, load_file
from .text import to_method_declaration
from .theme import resolve_theme

app = typer.Typer(no_args_is_help=True, help="Draw Nassi-Shneiderman structograms.")
console = Console()


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


@app.command("render")
def render(
    input_path: Path = typer.Argument(
        ..., help="Control tree, method, or parser document JSON file."
    ),
    method: Optional[str] = typer.Option(
        None, "--method", "-m", help="Method to draw from a parser document (Class.method or name)."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output file. Defaults to INPUT with the format's extension."
    ),
    fmt: Optional[str] = typer.Option(
        None, "--format", "-f", help=f"One of {', '.join(EXPORT_FORMATS)}. Inferred from --output."
    ),
    dark: bool = typer.Option(False, "--dark", help="Draw on a dark background."),
    monochrome: bool = typer.Option(False, "--monochrome", help="Use flat fills without header colors."),
    scale: int = typer.Option(2, "--scale", min=1, help="PNG resolution multiplier."),
    debug: bool = typer.Option(False, "--debug", help="Print the layout trace summary."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    _configure_logging(verbose)

    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    if fmt is None:
        fmt = output.suffix.lstrip(".") if output is not None and output.suffix else "svg"
    fmt = fmt.lower()
    if output is None:
        output = input_path.with_suffix(f".{fmt}")
        if output == input_path:
            output = input_path.with_name(f"{input_path.stem}.layout.{fmt}")

    generator = StructogramGenerator(
        theme=resolve_theme(colored=not monochrome, dark_mode=dark),
        debug=debug,
    )

    try:
        loaded = load_file(input_path, method)
        source = loaded.method if loaded.method is not None else loaded.tree
        if source is None:
            console.print(f"[yellow]Nothing to draw in[/] {input_path}")
            raise typer.Exit(code=1)
        options = {"scale": scale} if fmt == "png" else {}
        generator.save(source, str(output), fmt=fmt, **options)
    except (ParseError, ExportError) as exc:
        console.print(f"[red]Render failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(f"[green]Wrote[/] {output}")

    trace = generator.get_trace()
    if trace is not None:
        console.print(trace.summary(), markup=False)


@app.command("inspect")
def inspect(
    input_path: Path = typer.Argument(
        ..., help="Control tree, method, or parser document JSON file."
    ),
    method: Optional[str] = typer.Option(
        None, "--method", "-m", help="Method to inspect from a parser document."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    _configure_logging(verbose)

    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    try:
        loaded = load_file(input_path, method)
    except ParseError as exc:
        console.print(f"[red]Inspect failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    if loaded.method is not None:
        console.print(to_method_declaration(loaded.method), markup=False)

    generator = StructogramGenerator()
    layout = generator.layout(loaded.tree) if loaded.tree is not None else None
    console.print(describe_layout(layout), markup=False, highlight=False)
    if layout is None:
        return

    violations = check_layout_invariants(layout, text_width=generator.text_width)
    if violations:
        for violation in violations:
            console.print(f"[red]Violation:[/] {violation}")
        raise typer.Exit(code=1)
    console.print("[green]Layout is consistent[/]")


if __name__ == "__main__":
    app()
