from importlib.resources import files
import json
from pathlib import Path
import yaml
from .ir import Graph

TEMPLATES = {"sample", "prompt-chain"}


def _load_template_yaml(name: str) -> str:
    pkg = files('pipecanvas.templates')
    return (pkg / f"{name}.yaml").read_text()


def generate_graph_from_task(task: str) -> Graph:
    task = task.lower()
    if task not in TEMPLATES:
        raise ValueError(f"Unknown template '{task}'. Use one of: {', '.join(sorted(TEMPLATES))}")
    data = yaml.safe_load(_load_template_yaml(task.replace('-', '_')))
    return Graph(**data)


def load_graph(path: Path) -> Graph:
    """Read a snapshot; ``.json`` files as JSON, anything else as YAML."""
    text = Path(path).read_text()
    if Path(path).suffix.lower() == ".json":
        return Graph.model_validate(json.loads(text))
    return Graph.model_validate(yaml.safe_load(text) or {})


def save_graph_yaml(graph: Graph, path: Path):
    path.write_text(yaml.safe_dump(graph.model_dump(mode="json"), sort_keys=False))


def save_graph_json(graph: Graph, path: Path):
    path.write_text(json.dumps(graph.model_dump(mode="json"), indent=2))
