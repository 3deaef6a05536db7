import asyncio
import logging
from collections.abc import Coroutine, Sequence
from typing import Annotated, Any, TypeVar

import typer
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from treesitter_search.config import get_settings
from treesitter_search.core.ast import to_compact_json
from treesitter_search.core.index import StructuralIndex
from treesitter_search.core.tokens import default_encoding
from treesitter_search.errors import TreeSitterSearchError

T = TypeVar("T")

app = typer.Typer(
    name="treesitter-search",
    help="TreeSitter Code Search: structural code search and analysis.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


@app.callback()
def _configure() -> None:
    logging.basicConfig(level=get_settings().log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def _get_index(count_tokens: bool = False) -> StructuralIndex:
    encoding = default_encoding() if count_tokens else None
    return StructuralIndex(encoding=encoding)


def _run(coro: Coroutine[Any, Any, T]) -> T:
    try:
        return asyncio.run(coro)
    except TreeSitterSearchError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


@app.command("search")
def search(
    path: Annotated[str, typer.Argument(help="Path to the source file.")],
    query: Annotated[str, typer.Argument(help="S-expression tree-sitter query.")],
) -> None:
    """Run a structural query against a file."""
    index = _get_index()
    captures = _run(index.search(path, query))
    _render_table(
        ["capture", "text", "start", "end"],
        [(c.name, c.text, f"{c.start.row}:{c.start.column}", f"{c.end.row}:{c.end.column}") for c in captures],
    )


@app.command("elements")
def elements(
    path: Annotated[str, typer.Argument(help="Path to the source file.")],
    kind: Annotated[str, typer.Argument(help="Syntax node kind, e.g. function_declaration.")],
) -> None:
    """List every node of one kind in a file."""
    index = _get_index()
    found = _run(index.list_elements(path, kind))
    _render_table(
        ["name", "type", "start", "end"],
        [(e.name, e.type, f"{e.start.row}:{e.start.column}", f"{e.end.row}:{e.end.column}") for e in found],
    )


@app.command("snippet")
def snippet(
    path: Annotated[str, typer.Argument(help="Path to the source file.")],
    row: Annotated[int, typer.Argument(min=0, help="Zero-based row.")],
    column: Annotated[int, typer.Argument(min=0, help="Zero-based column.")],
) -> None:
    """Print the function or class enclosing a position."""
    index = _get_index()
    text = _run(index.snippet_at(path, row, column))
    if text is None:
        console.print("[yellow]Could not find a contextual snippet for the given position.[/yellow]")
        raise typer.Exit(code=1)
    parsed = index.get(path)
    lexer = parsed.language if parsed is not None else "text"
    console.print(Syntax(text, lexer, line_numbers=False))


@app.command("analyze")
def analyze(
    path: Annotated[str, typer.Argument(help="Path to the source file.")],
    language: Annotated[str | None, typer.Option(help="Language name (inferred from the extension if omitted).")] = None,
    show_ast: Annotated[bool, typer.Option("--show-ast", help="Print the thin AST as JSON.")] = False,
) -> None:
    """Compare token counts of the raw source, its CST and its thin AST."""
    index = _get_index(count_tokens=True)
    result = _run(index.analyze(path, language))
    _render_table(
        ["representation", "tokens"],
        [
            ("original", result.original_token_count),
            ("cst", result.cst_token_count),
            ("thin ast", result.ast_token_count),
        ],
    )
    if show_ast and result.ast is not None:
        console.print_json(to_compact_json(result.ast))


@app.command("serve")
def serve(
    transport: Annotated[str, typer.Option(help="MCP transport: stdio or sse.")] = "stdio",
    host: str = "127.0.0.1",
    port: int = 8000,
) -> None:
    """Start the MCP server."""
    from treesitter_search.mcp.server import create_mcp_server

    server = create_mcp_server(_get_index(count_tokens=True))
    if transport == "stdio":
        server.run(transport="stdio")
    else:
        console.print(f"[green]Starting MCP server (transport: {transport}) on {host}:{port}[/green]")
        server.run(transport=transport, host=host, port=port)  # type: ignore[arg-type]


def main() -> None:
    app()
