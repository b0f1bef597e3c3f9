"""
Storage module for the L-system generator.

Provides persistence for:
- Evolution results (generation history and statistics)
- Arbitrary JSON data with numpy arrays
"""

from .json_storage import (
    JSONStorage,
    save_result,
    load_result,
    result_to_dict,
    result_from_dict,
)

__all__ = [
    "JSONStorage",
    "save_result",
    "load_result",
    "result_to_dict",
    "result_from_dict",
]
