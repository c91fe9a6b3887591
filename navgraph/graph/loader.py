"""Load graph definitions from TOML or JSON files.

TOML layout:

    id = "onboarding"
    name = "Onboarding"
    entry_node_id = "welcome"

    [[nodes]]
    id = "welcome"
    label = "Welcome"
    allowed_next = ["profile"]

    [[nodes.branches]]
    condition = "returning_user"
    target = "dashboard"
"""

import json
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from navgraph.exceptions import GraphValidationError
from navgraph.graph.models import NavigationGraph
from navgraph.observability.logging import get_logger

logger = get_logger(__name__)

SUPPORTED_SUFFIXES = (".toml", ".json")


def parse_graph(data: dict[str, Any], source: str = "<memory>") -> NavigationGraph:
    """Build a NavigationGraph from a plain mapping.

    Raises:
        GraphValidationError: If the mapping does not fit the graph schema
    """
    try:
        return NavigationGraph.model_validate(data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise GraphValidationError(f"Invalid graph definition in {source}", errors) from e


def load_graph_file(path: Path | str) -> NavigationGraph:
    """Load one graph file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the suffix is not .toml or .json
        GraphValidationError: If the content is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Graph file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported graph file type: {path.name}")

    try:
        if suffix == ".toml":
            with path.open("rb") as f:
                data = tomllib.load(f)
        else:
            data = json.loads(path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        raise GraphValidationError(f"Cannot parse {path}", [str(e)]) from e

    graph = parse_graph(data, source=str(path))
    logger.info(
        "graph_file_loaded",
        path=str(path),
        graph_id=graph.id,
        version=graph.version,
        node_count=len(graph.nodes),
    )
    return graph


def load_graph_dir(directory: Path | str) -> list[NavigationGraph]:
    """Load every .toml and .json graph in a directory, sorted by file name."""
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Graph directory not found: {directory}")

    files = sorted(p for p in directory.iterdir() if p.suffix.lower() in SUPPORTED_SUFFIXES)
    return [load_graph_file(p) for p in files]
