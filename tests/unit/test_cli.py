"""Tests for the navgraph command line."""

from pathlib import Path

import pytest

from navgraph.cli import build_parser, main
from tests.factories import GraphFactory


@pytest.fixture
def onboarding_file(tmp_path: Path) -> Path:
    path = tmp_path / "onboarding.json"
    path.write_text(GraphFactory.onboarding().model_dump_json())
    return path


@pytest.fixture
def unreachable_file(tmp_path: Path) -> Path:
    graph = GraphFactory.create(
        [
            GraphFactory.node("start", allowed_next=["end"]),
            GraphFactory.node("end", is_terminal=True),
            GraphFactory.node("orphan", is_terminal=True),
        ],
        id="orphaned",
    )
    path = tmp_path / "orphaned.json"
    path.write_text(graph.model_dump_json())
    return path


class TestValidateCommand:
    def test_valid_file(self, onboarding_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["validate", str(onboarding_file)]) == 0
        assert "ok (onboarding v1, 9 nodes)" in capsys.readouterr().out

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["validate", str(tmp_path / "nope.toml")]) == 1
        assert "error" in capsys.readouterr().out

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "graph.yaml"
        path.write_text("id: x")
        assert main(["validate", str(path)]) == 1

    def test_malformed_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "bad.toml"
        path.write_text('id = "bad"\n[[nodes]]\nid = "a"\n')
        assert main(["validate", str(path)]) == 1
        assert "  - " in capsys.readouterr().out

    def test_invalid_graph(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        graph = GraphFactory.create([GraphFactory.node("a", allowed_next=["ghost"])], id="g")
        path = tmp_path / "g.json"
        path.write_text(graph.model_dump_json())

        assert main(["validate", str(path)]) == 1
        out = capsys.readouterr().out
        assert "invalid" in out
        assert "unknown next node 'ghost'" in out

    def test_warnings_fail_only_in_strict_mode(
        self, unreachable_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["validate", str(unreachable_file)]) == 0
        assert "warning: Node 'orphan' is unreachable" in capsys.readouterr().out

        assert main(["validate", "--strict", str(unreachable_file)]) == 1
        assert main(["validate", "--strict", "--no-unreachable", str(unreachable_file)]) == 0

    def test_one_bad_file_fails_the_run(self, onboarding_file: Path, tmp_path: Path) -> None:
        assert main(["validate", str(onboarding_file), str(tmp_path / "nope.json")]) == 1


class TestParser:
    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_serve_defaults(self) -> None:
        args = build_parser().parse_args(["serve"])
        assert args.host is None
        assert args.port is None
        assert args.reload is False
