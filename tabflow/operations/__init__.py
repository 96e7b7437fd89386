"""
Operations sub-package for tabflow.

Design: Strategy Pattern
- base.py defines BaseOperation (buffered + streaming strategies) and the
  per-run OperationContext.
- merge.py, convert.py, split.py implement the three operations.

The engine looks operations up by name in ``OPERATIONS``.
"""

from __future__ import annotations

from tabflow.operations.base import BaseOperation, OperationContext
from tabflow.operations.convert import ConvertOperation
from tabflow.operations.merge import MergeOperation
from tabflow.operations.split import SplitOperation

__all__ = [
    "BaseOperation",
    "OperationContext",
    "MergeOperation",
    "ConvertOperation",
    "SplitOperation",
    "OPERATIONS",
]

OPERATIONS: dict[str, type[BaseOperation]] = {
    MergeOperation.name: MergeOperation,
    ConvertOperation.name: ConvertOperation,
    SplitOperation.name: SplitOperation,
}
