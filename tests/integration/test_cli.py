"""
Integration tests for the gomorph command line.
"""

import orjson
import pytest
from typer.testing import CliRunner

from gomorph.cli.main import app
from gomorph.config.loader import load_config_from_yaml

runner = CliRunner()

GOOD_SOURCE = "public class Point {\n    private int x;\n    public int getX() { return x; }\n}\n"
BAD_SOURCE = "public @interface Marker {}\n\npublic class Keeper {}\n"


@pytest.fixture
def java_file(tmp_path):
    def write(text: str, name: str = "Point.java"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return write


class TestTranslate:
    def test_writes_destination(self, java_file, tmp_path):
        dest = tmp_path / "out" / "point.go"
        result = runner.invoke(app, ["translate", str(java_file(GOOD_SOURCE)), str(dest)])
        assert result.exit_code == 0
        go = dest.read_text(encoding="utf-8")
        assert go.startswith("package converted\n")
        assert "func (this *Point) GetX() int {" in go

    def test_prints_to_stdout(self, java_file):
        result = runner.invoke(app, ["translate", str(java_file(GOOD_SOURCE))])
        assert result.exit_code == 0
        assert "type Point struct {" in result.output

    def test_unreadable_input(self, tmp_path):
        result = runner.invoke(app, ["translate", str(tmp_path / "Missing.java")])
        assert result.exit_code == 1

    def test_tolerant_failure_still_succeeds(self, java_file, tmp_path):
        dest = tmp_path / "keeper.go"
        report = tmp_path / "report.json"
        result = runner.invoke(
            app, ["translate", str(java_file(BAD_SOURCE, "Keeper.java")), str(dest), "--report", str(report)]
        )
        assert result.exit_code == 0
        assert "// FIXME: Failed to migrate" in dest.read_text(encoding="utf-8")

        data = orjson.loads(report.read_bytes())
        assert data["mode"] == "tolerant"
        assert data["migrated_cleanly"] is False
        assert len(data["diagnostics"]) == 1
        assert data["diagnostics"][0]["location"] == "@interface Marker"
        assert data["diagnostics"][0]["category"] == "unhandled"

    def test_strict_failure_exits(self, java_file, tmp_path):
        dest = tmp_path / "keeper.go"
        result = runner.invoke(app, ["translate", str(java_file(BAD_SOURCE, "Keeper.java")), str(dest), "-W"])
        assert result.exit_code == 1
        assert not dest.exists()

    def test_config_file(self, java_file, tmp_path):
        config = tmp_path / "custom.yaml"
        config.write_text("package_name: geometry\n", encoding="utf-8")
        dest = tmp_path / "point.go"
        result = runner.invoke(
            app, ["translate", str(java_file(GOOD_SOURCE)), str(dest), "--config", str(config)]
        )
        assert result.exit_code == 0
        assert dest.read_text(encoding="utf-8").startswith("package geometry\n")

    def test_invalid_config_is_ignored(self, java_file, tmp_path):
        config = tmp_path / "broken.yaml"
        config.write_text("package_name: [oops\n", encoding="utf-8")
        dest = tmp_path / "point.go"
        result = runner.invoke(
            app, ["translate", str(java_file(GOOD_SOURCE)), str(dest), "-c", str(config)]
        )
        assert result.exit_code == 0
        assert dest.read_text(encoding="utf-8").startswith("package converted\n")


class TestInit:
    def test_generates_config(self, tmp_path):
        path = tmp_path / "gomorph.yaml"
        result = runner.invoke(app, ["init", str(path)])
        assert result.exit_code == 0
        assert load_config_from_yaml(path).package_name == "converted"
