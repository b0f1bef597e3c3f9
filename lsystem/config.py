"""
Configuration module for the L-system generator.

Contains all configurable parameters for building and running a system.
Config-driven systems use string symbols, since JSON object keys are
strings.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional
import json
from pathlib import Path


@dataclass
class EngineParams:
    """Rewriting engine parameters."""
    executor: Literal["serial", "thread", "process"] = "thread"   # "process" for CPU-bound runs
    max_workers: Optional[int] = None   # None = CPU count
    parallel_threshold: int = 4096      # Minimum generation length sent to a pool


@dataclass
class RunParams:
    """Run parameters."""
    generations: int = 7                # Generation to produce and print
    store_history: bool = False
    history_stride: int = 1             # Store every N-th generation
    detect_cycles: bool = False         # Stop early on a repeated generation


@dataclass
class StorageParams:
    """Storage parameters."""
    base_path: Path = field(default_factory=lambda: Path("./data"))
    compress: bool = False


@dataclass
class LSystemConfig:
    """
    Main configuration container for an L-system run.

    Example:
        config = LSystemConfig(
            name="algae",
            axiom=["A"],
            rules={"A": ["A", "B"], "B": ["A"]},
        )
        config.save("algae.json")
    """
    name: str = "lsystem"
    axiom: List[str] = field(default_factory=list)
    rules: Dict[str, List[str]] = field(default_factory=dict)

    # Sub-configurations
    engine: EngineParams = field(default_factory=EngineParams)
    run: RunParams = field(default_factory=RunParams)
    storage: StorageParams = field(default_factory=StorageParams)

    def save(self, path: str | Path) -> None:
        """Save configuration to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self._to_dict()
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    @classmethod
    def load(cls, path: str | Path) -> "LSystemConfig":
        """Load configuration from JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls._from_dict(data)

    def _to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        def convert(obj):
            if isinstance(obj, Path):
                return str(obj)
            elif hasattr(obj, '__dataclass_fields__'):
                return {k: convert(v) for k, v in obj.__dict__.items()}
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            elif isinstance(obj, (list, tuple)):
                return [convert(x) for x in obj]
            return obj

        return convert(self)

    @classmethod
    def _from_dict(cls, data: dict) -> "LSystemConfig":
        """Reconstruct from dictionary."""
        data = dict(data)

        if 'engine' in data:
            data['engine'] = EngineParams(**data['engine'])
        if 'run' in data:
            data['run'] = RunParams(**data['run'])
        if 'storage' in data:
            storage = dict(data['storage'])
            if 'base_path' in storage:
                storage['base_path'] = Path(storage['base_path'])
            data['storage'] = StorageParams(**storage)

        # Productions may be written as strings of single-character symbols
        if 'axiom' in data and isinstance(data['axiom'], str):
            data['axiom'] = list(data['axiom'])
        if 'rules' in data:
            data['rules'] = {
                k: list(v) for k, v in data['rules'].items()
            }

        return cls(**data)

    def validate(self) -> List[str]:
        """Validate configuration, return list of warnings/errors."""
        issues = []

        if not self.axiom:
            issues.append("axiom must contain at least one symbol")

        if self.engine.executor not in ("serial", "thread", "process"):
            issues.append(f"unknown executor: {self.engine.executor}")
        if self.engine.max_workers is not None and self.engine.max_workers < 1:
            issues.append("max_workers must be at least 1")
        if self.engine.parallel_threshold < 1:
            issues.append("parallel_threshold must be at least 1")

        if self.run.generations < 0:
            issues.append("generations must be non-negative")
        if self.run.generations > 64:
            issues.append("generations > 64 may exhaust memory for expanding systems")
        if self.run.history_stride < 1:
            issues.append("history_stride must be at least 1")

        return issues


# Preset configurations
def sierpinski_config() -> LSystemConfig:
    """Sierpinski arrowhead-style system."""
    return LSystemConfig(
        name="sierpinski",
        axiom=list("A-B-B"),
        rules={
            "A": list("A-B+A+B-A"),
            "B": list("BB"),
        },
        run=RunParams(generations=7),
    )


def fibonacci_config() -> LSystemConfig:
    """Fibonacci word: lengths follow the Fibonacci sequence."""
    return LSystemConfig(
        name="fibonacci",
        axiom=["a"],
        rules={
            "a": ["b"],
            "b": ["a", "b"],
        },
        run=RunParams(generations=7),
    )


def algae_config() -> LSystemConfig:
    """Lindenmayer's algae system."""
    return LSystemConfig(
        name="algae",
        axiom=["A"],
        rules={
            "A": ["A", "B"],
            "B": ["A"],
        },
        run=RunParams(generations=7, store_history=True),
    )


PRESETS = {
    "sierpinski": sierpinski_config,
    "fibonacci": fibonacci_config,
    "algae": algae_config,
}
