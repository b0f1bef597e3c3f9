"""
Tests for configuration.
"""

import json
from pathlib import Path

import pytest
from lsystem.config import (
    LSystemConfig, EngineParams, RunParams, StorageParams,
    sierpinski_config, fibonacci_config, algae_config, PRESETS,
)


class TestLSystemConfig:
    """Tests for LSystemConfig."""

    def test_defaults(self):
        config = LSystemConfig()
        assert config.engine.executor == "thread"
        assert config.run.generations == 7
        assert config.storage.base_path == Path("./data")

    def test_save_load_roundtrip(self, tmp_path):
        config = LSystemConfig(
            name="koch",
            axiom=["F"],
            rules={"F": list("F+F-F-F+F")},
            engine=EngineParams(executor="serial", max_workers=2),
            run=RunParams(generations=3, detect_cycles=True),
            storage=StorageParams(base_path=tmp_path / "out", compress=True),
        )
        path = tmp_path / "nested" / "koch.json"
        config.save(path)

        loaded = LSystemConfig.load(path)
        assert loaded == config

    def test_from_dict_accepts_strings(self):
        """Axiom and productions may be written as strings of characters."""
        config = LSystemConfig._from_dict({
            "axiom": "A-B",
            "rules": {"A": "AB", "B": []},
        })
        assert config.axiom == ["A", "-", "B"]
        assert config.rules == {"A": ["A", "B"], "B": []}

    def test_saved_json_layout(self, tmp_path):
        path = tmp_path / "fib.json"
        fibonacci_config().save(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["axiom"] == ["a"]
        assert data["rules"] == {"a": ["b"], "b": ["a", "b"]}
        assert data["storage"]["base_path"] == "data"

    def test_unknown_key(self):
        with pytest.raises(TypeError):
            LSystemConfig._from_dict({"iterations": 3})


class TestValidation:
    """Tests for LSystemConfig.validate."""

    def test_presets_valid(self):
        for factory in PRESETS.values():
            assert factory().validate() == []

    def test_empty_axiom(self):
        issues = LSystemConfig().validate()
        assert any("axiom" in issue for issue in issues)

    def test_bad_engine_and_run(self):
        config = sierpinski_config()
        config.engine.executor = "gpu"
        config.engine.max_workers = 0
        config.run.generations = -1
        config.run.history_stride = 0
        assert len(config.validate()) == 4

    def test_large_generation_warning(self):
        config = algae_config()
        config.run.generations = 100
        assert len(config.validate()) == 1
