"""Tests for settings and report file helpers."""

from __future__ import annotations

from pathlib import Path

from reelvoice.utils.io import read_json, read_yaml, write_json, write_yaml


def test_report_stringifies_paths(tmp_path):
    path = tmp_path / "out" / "narration-log.json"
    write_json(path, {"asset": Path("/tmp/a.mp3"), "residual_seconds": None})
    assert read_json(path) == {"asset": "/tmp/a.mp3", "residual_seconds": None}
    assert path.read_text().endswith("}\n")


def test_yaml_replaced_in_place(tmp_path):
    path = tmp_path / "reelvoice.yaml"
    write_yaml(path, {"timing": {"max_tempo": 2.0}})
    write_yaml(path, {"mixing": {"voices": [{"provider": "openai"}]}})

    loaded = read_yaml(path)
    assert loaded == {"mixing": {"voices": [{"provider": "openai"}]}}
    assert type(loaded) is dict
    assert type(loaded["mixing"]["voices"]) is list
    assert [p.name for p in tmp_path.iterdir()] == ["reelvoice.yaml"]
