"""
JSON storage for generations and evolution results.
"""

from __future__ import annotations
import json
import gzip
import logging
from enum import Enum
from pathlib import Path
from typing import Dict, List, Any, Union
from dataclasses import asdict, is_dataclass
import numpy as np

from ..core.evolution import EvolutionResult, EvolutionStats, Generation

logger = logging.getLogger(__name__)


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy arrays, enum symbols and dataclasses."""

    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return {
                '__numpy__': True,
                'dtype': str(obj.dtype),
                'shape': obj.shape,
                'data': obj.tolist(),
            }
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.bool_):
            return bool(obj)
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, Path):
            return str(obj)
        if is_dataclass(obj) and not isinstance(obj, type):
            return asdict(obj)
        return super().default(obj)


def numpy_decoder(dct):
    """JSON decoder hook for numpy arrays."""
    if '__numpy__' in dct:
        return np.array(dct['data'], dtype=dct['dtype']).reshape(dct['shape'])
    return dct


def _dump(data: Any, filepath: Path, compress: bool) -> None:
    if compress:
        with gzip.open(filepath, 'wt', encoding='utf-8') as f:
            json.dump(data, f, cls=NumpyEncoder)
    else:
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, cls=NumpyEncoder, indent=2)


def _load(filepath: Path) -> Any:
    if filepath.suffix == '.gz':
        with gzip.open(filepath, 'rt', encoding='utf-8') as f:
            return json.load(f, object_hook=numpy_decoder)
    with open(filepath, 'r', encoding='utf-8') as f:
        return json.load(f, object_hook=numpy_decoder)


class JSONStorage:
    """
    JSON-based storage backend.

    Supports:
    - Plain JSON files
    - Gzipped JSON files
    - Automatic numpy array handling
    """

    EXTENSIONS = ('', '.json', '.json.gz')

    def __init__(self, base_path: Union[str, Path]):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def save(
        self,
        data: Any,
        filename: str,
        compress: bool = False,
    ) -> Path:
        """
        Save data to JSON file.

        Args:
            data: Data to save
            filename: Filename (without extension)
            compress: Use gzip compression

        Returns:
            Path to saved file
        """
        suffix = '.json.gz' if compress else '.json'
        filepath = self.base_path / f"{filename}{suffix}"
        _dump(data, filepath, compress)
        logger.debug(f"Saved {filepath}")
        return filepath

    def _find(self, filename: str) -> Path:
        for ext in self.EXTENSIONS:
            filepath = self.base_path / f"{filename}{ext}"
            if filepath.is_file():
                return filepath
        raise FileNotFoundError(f"No JSON file found for {filename}")

    def load(self, filename: str) -> Any:
        """Load data from JSON file (filename with or without extension)."""
        return _load(self._find(filename))

    def list_files(self, pattern: str = "*.json*") -> List[Path]:
        """List all JSON files in storage."""
        return sorted(self.base_path.glob(pattern))

    def exists(self, filename: str) -> bool:
        try:
            self._find(filename)
        except FileNotFoundError:
            return False
        return True

    def delete(self, filename: str) -> bool:
        """Delete file if exists."""
        try:
            self._find(filename).unlink()
        except FileNotFoundError:
            return False
        return True


def result_to_dict(result: EvolutionResult) -> Dict[str, Any]:
    return {
        'final': result.final.to_dict(),
        'history': [g.to_dict() for g in result.history],
        'stats': asdict(result.stats),
        'stop_reason': result.stop_reason,
        'lengths': result.length_series(),
    }


def result_from_dict(data: Dict[str, Any]) -> EvolutionResult:
    return EvolutionResult(
        final=Generation.from_dict(data['final']),
        history=[Generation.from_dict(g) for g in data.get('history', [])],
        stats=EvolutionStats(**data.get('stats', {})),
        stop_reason=data.get('stop_reason', "max_generations"),
    )


def save_result(
    result: EvolutionResult,
    filepath: Union[str, Path],
    compress: bool = False,
) -> Path:
    """
    Save an evolution result.

    Symbols must be JSON-serializable (strings, numbers or Enum members,
    which are stored by value).

    Args:
        result: Result of EvolutionRunner.run
        filepath: Full path to save file
        compress: Use compression (implied by a .gz suffix)

    Returns:
        Path to saved file
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    _dump(result_to_dict(result), filepath, compress or filepath.suffix == '.gz')
    logger.info(f"Saved {len(result.history)} generations to {filepath}")
    return filepath


def load_result(filepath: Union[str, Path]) -> EvolutionResult:
    """Load an evolution result saved with save_result."""
    return result_from_dict(_load(Path(filepath)))
