"""Command line entry point.

    navgraph validate graphs/onboarding.toml graphs/checkout.json
    navgraph serve --port 8080
"""

import argparse
import sys

from navgraph.exceptions import GraphValidationError
from navgraph.graph import GraphValidator
from navgraph.graph.loader import load_graph_file
from navgraph.observability.logging import setup_logging


def _validate(args: argparse.Namespace) -> int:
    """Validate graph files. Predicate names are not checked offline."""
    validator = GraphValidator(warn_on_unreachable=not args.no_unreachable)
    failed = False

    for path in args.files:
        try:
            graph = load_graph_file(path)
        except (FileNotFoundError, ValueError) as e:
            print(f"{path}: error: {e}")
            failed = True
            continue
        except GraphValidationError as e:
            print(f"{path}: error: {e.message}")
            for error in e.errors:
                print(f"  - {error}")
            failed = True
            continue

        result = validator.validate(graph)
        status = "ok" if result.is_valid else "invalid"
        print(f"{path}: {status} ({graph.id} v{graph.version}, {len(graph.nodes)} nodes)")
        for error in result.errors:
            print(f"  error: {error}")
        for warning in result.warnings:
            print(f"  warning: {warning}")
        if not result.is_valid or (args.strict and result.warnings):
            failed = True

    return 1 if failed else 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from navgraph.api.dependencies import get_settings

    settings = get_settings()
    uvicorn.run(
        "navgraph.api.app:create_app",
        factory=True,
        host=args.host or settings.api.host,
        port=args.port or settings.api.port,
        reload=args.reload,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="navgraph",
        description="Directed navigation graphs with AI-assisted step selection",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Validate graph definition files")
    validate.add_argument("files", nargs="+", help="TOML or JSON graph files")
    validate.add_argument(
        "--strict", action="store_true", help="Treat warnings as failures"
    )
    validate.add_argument(
        "--no-unreachable",
        action="store_true",
        help="Do not warn about nodes unreachable from the entry node",
    )
    validate.set_defaults(handler=_validate)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address (default from config)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default from config)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve.set_defaults(handler=_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level="WARNING", format="console")
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
