"""Unit tests for CLI utilities."""

import json
from unittest.mock import patch

import pytest

from hipsweb.cli.utils import load_dataset, load_settings_or_exit, resolve_hazard_or_exit


class TestUtils:
    def test_load_dataset(self, snapshot_file):
        dataset = load_dataset(str(snapshot_file))
        assert dataset is not None
        assert len(dataset.edges) == 4
        assert dataset.graph.node_count == 5

    def test_load_dataset_missing(self, tmp_path, capsys):
        dataset = load_dataset(str(tmp_path / "missing.json"))
        assert dataset is None
        captured = capsys.readouterr()
        assert "Snapshot file not found" in captured.err

    def test_load_dataset_bad_shape(self, tmp_path, capsys):
        f = tmp_path / "hips.json"
        f.write_text(json.dumps({"nodes": []}))
        assert load_dataset(str(f)) is None
        assert "missing edges array" in capsys.readouterr().err

    def test_resolve_hazard(self, small_dataset):
        assert resolve_hazard_or_exit(small_dataset, "MH0001") == "a"

    def test_resolve_hazard_missing_exits(self, small_dataset):
        with pytest.raises(SystemExit) as exc:
            resolve_hazard_or_exit(small_dataset, "zzz")
        assert exc.value.code == 1

    def test_settings_error_exits(self, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("cascade: {max_children: 0}")
        with patch("hipsweb.cli.utils.echo_error") as echo:
            with pytest.raises(SystemExit):
                load_settings_or_exit(str(config))
        assert "Invalid config" in echo.call_args[0][0]
