import json
import logging
from pathlib import Path
import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from typing import Optional

from . import config
from .errors import GraphError
from .generator import TEMPLATES, generate_graph_from_task, load_graph, save_graph_json, save_graph_yaml
from .layout import assign_layout
from .validator import validate_graph
from .visualize import ascii_plan

app = typer.Typer(no_args_is_help=True, help="pipecanvas CLI — build and check pipeline graphs")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging.")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.LOG_LEVEL,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _load(file: Path):
    try:
        return load_graph(file)
    except (OSError, ValueError, yaml.YAMLError) as e:  # ValueError covers pydantic and JSON errors
        rprint(f"[bold red]Could not load {file}:[/] {escape(str(e))}")
        raise typer.Exit(code=1)


@app.command()
def init():
    """Create a local project layout (pipelines/)."""
    Path("pipelines").mkdir(exist_ok=True)
    rprint(Panel.fit("[bold green]Initialized[/] directory: pipelines/"))


@app.command()
def generate(task: str = typer.Option("sample", help=f"Template to use: {' | '.join(sorted(TEMPLATES))}"),
             name: str = typer.Option("pipeline", help="Output filename (without extension)"),
             outdir: Path = typer.Option(Path("pipelines"), help="Where to place the snapshot"),
             as_json: bool = typer.Option(False, "--json", help="Write JSON instead of YAML"),
    ):
    """Write a pipeline snapshot from a packaged template."""
    try:
        graph = generate_graph_from_task(task)
    except ValueError as e:
        rprint(f"[bold red]{escape(str(e))}[/]")
        raise typer.Exit(code=1)
    outdir.mkdir(exist_ok=True, parents=True)
    if as_json:
        outfile = outdir / f"{name}.json"
        save_graph_json(graph, outfile)
    else:
        outfile = outdir / f"{name}.yaml"
        save_graph_yaml(graph, outfile)
    rprint(Panel.fit(f"Saved template [bold]{task}[/] to [cyan]{outfile}[/]"))


@app.command()
def validate(file: Path):
    """Validate a pipeline snapshot (edge endpoints, port directions, cycles)."""
    ok, messages = validate_graph(_load(file))
    table = Table(title="Validation Report", show_lines=True)
    table.add_column("Status", justify="center", style="bold")
    table.add_column("Message")
    for m in messages:
        status = "OK" if m.startswith("OK:") else "ERR"
        table.add_row(status, m)
    rprint(table)
    if not ok:
        raise typer.Exit(code=1)


@app.command()
def analyze(file: Path,
            remote: bool = typer.Option(False, "--remote/--local", help="Ask the analysis service first."),
            url: Optional[str] = typer.Option(None, help="Analysis service base URL."),
    ):
    """Print node count, edge count and DAG status as JSON."""
    graph = _load(file)
    if remote:
        from .client import AnalysisClient
        result = AnalysisClient(base_url=url).parse_pipeline(graph)
    else:
        from .analysis import analyze as analyze_graph
        result = analyze_graph(graph)
    print(json.dumps(result.model_dump()))


@app.command()
def explain(file: Path):
    """Print an ASCII plan of the pipeline graph."""
    print(ascii_plan(_load(file)))


@app.command()
def ports(file: Path, node_id: str):
    """Show a node's resolved ports and their placement."""
    graph = _load(file)
    try:
        node = graph.get_node(node_id)
    except GraphError as e:
        rprint(f"[bold red]{escape(str(e))}[/]")
        raise typer.Exit(code=1)
    layout = assign_layout(node.ports)
    table = Table(title=f"Ports of {node.id} ({node.kind.value})")
    table.add_column("Port")
    table.add_column("Direction")
    table.add_column("Side")
    table.add_column("Offset", justify="right")
    for p in node.ports:
        placement = layout[p.id]
        offset = "center" if placement.offset_percent is None else f"{placement.offset_percent:g}%"
        table.add_row(p.id, p.direction.value, placement.side.value, offset)
    rprint(table)


@app.command()
def serve(host: str = typer.Option("127.0.0.1"), port: int = typer.Option(8000)):
    """Run the analysis service."""
    import uvicorn
    from .server import app as api_app
    uvicorn.run(api_app, host=host, port=port)


if __name__ == "__main__":
    app()
