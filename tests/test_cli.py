"""Tests for the CLI interface."""
import json
import subprocess
import sys
from pathlib import Path

import pytest

CLI = [sys.executable, "-m", "structure_builder"]
ROOT = Path(__file__).parent.parent


def run_cli(*args: str) -> dict:
    """Run CLI command and return parsed JSON output."""
    result = subprocess.run(
        [*CLI, *args],
        capture_output=True, text=True, cwd=str(ROOT),
    )
    assert result.returncode == 0, f"CLI failed: {result.stderr}\n{result.stdout}"
    return json.loads(result.stdout)


def run_cli_expect_fail(*args: str) -> dict:
    """Run CLI command expecting failure, return parsed JSON output."""
    result = subprocess.run(
        [*CLI, *args],
        capture_output=True, text=True, cwd=str(ROOT),
    )
    assert result.returncode != 0
    return json.loads(result.stdout)


def _rect(w: float, d: float) -> dict:
    return {"vertices": [
        {"x": 0, "y": 0}, {"x": w, "y": 0}, {"x": w, "y": d}, {"x": 0, "y": d},
    ]}


@pytest.fixture
def models_file(tmp_path: Path) -> Path:
    path = tmp_path / "models.json"
    path.write_text(json.dumps({
        "levels": [
            {"name": "L1", "profile": _rect(20, 30), "elevation": 0, "height": 10},
            {"name": "L2", "profile": _rect(20, 30), "elevation": 10, "height": 10},
        ],
    }))
    return path


class TestFrame:
    def test_frame(self, models_file):
        data = run_cli("frame", str(models_file))
        assert data["ok"] is True
        assert data["stats"]["columns"] == 96
        assert data["stats"]["girders"] == 164
        assert data["stats"]["beams"] > 0
        assert data["longest_grid_span"] == 0.0

    def test_frame_with_inputs(self, models_file, tmp_path):
        inputs = tmp_path / "inputs.json"
        inputs.write_text(json.dumps({"insert_columns_at_external_edges": False}))
        data = run_cli("frame", str(models_file), "--inputs", str(inputs))
        assert data["stats"]["columns"] == 48

    def test_frame_writes_members(self, models_file, tmp_path):
        out = tmp_path / "out" / "members.json"
        data = run_cli("frame", str(models_file), "-o", str(out))
        assert Path(data["output"]) == out
        saved = json.loads(out.read_text())
        assert len(saved["members"]) == data["stats"]["total_members"]
        assert saved["materials"][0]["name"] == "Steel"

    def test_frame_renders_plan(self, models_file, tmp_path):
        png = tmp_path / "plan.png"
        data = run_cli("frame", str(models_file), "--render", str(png))
        assert data["render"] == str(png)
        assert png.stat().st_size > 0

    def test_missing_models_file(self, tmp_path):
        data = run_cli_expect_fail("frame", str(tmp_path / "nope.json"))
        assert data["ok"] is False
        assert "not found" in data["error"]

    def test_empty_levels(self, tmp_path):
        path = tmp_path / "models.json"
        path.write_text(json.dumps({"levels": []}))
        data = run_cli_expect_fail("frame", str(path))
        assert data["ok"] is False
        assert "No LevelVolumes" in data["error"]

    def test_no_levels(self, tmp_path):
        path = tmp_path / "models.json"
        path.write_text(json.dumps({"grids": []}))
        data = run_cli_expect_fail("frame", str(path))
        assert "Levels are required" in data["error"]

    def test_invalid_models_file(self, tmp_path):
        path = tmp_path / "models.json"
        path.write_text(json.dumps({"levels": [{"profile": _rect(5, 5), "height": -1}]}))
        data = run_cli_expect_fail("frame", str(path))
        assert "Invalid models file" in data["error"]

    def test_unknown_profile(self, models_file, tmp_path):
        inputs = tmp_path / "inputs.json"
        inputs.write_text(json.dumps({"beam_type": "IPE200"}))
        data = run_cli_expect_fail("frame", str(models_file), "-i", str(inputs))
        assert "Unknown profile" in data["error"]


class TestProfiles:
    def test_list(self):
        data = run_cli("profiles")
        assert data["ok"] is True
        names = [p["name"] for p in data["profiles"]]
        assert "W10x100" in names
        assert "W16x31" in names
        assert all(p["depth"] > 0 for p in data["profiles"])


class TestVersion:
    def test_version(self):
        result = subprocess.run(
            [*CLI, "version"], capture_output=True, text=True, cwd=str(ROOT),
        )
        assert result.returncode == 0
        assert "structure-builder v" in result.stdout
