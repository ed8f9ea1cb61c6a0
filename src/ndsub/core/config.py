from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

_ORDER_ALIASES = {
    "row": "row",
    "row_major": "row",
    "row-major": "row",
    "c": "row",
    "column": "column",
    "col": "column",
    "column_major": "column",
    "column-major": "column",
    "f": "column",
}

_INDEX_DTYPES = {"intp", "int64", "int32"}


def normalize_order(order: str) -> str:
    key = str(order).strip().lower()
    if key not in _ORDER_ALIASES:
        raise ValueError(f"Unsupported flattening order: {order}")
    return _ORDER_ALIASES[key]


@dataclass(frozen=True)
class IndexingConfig:
    """
    Switches shared by the subsetting, assignment and reshape entry points.

    * ``order`` is the default flattening order used by ``reshape`` (``"row"``
      or ``"column"``; ``"C"``/``"F"`` are accepted as aliases).
    * ``copy`` forces row-major ``reshape`` to materialise a fresh array
      instead of returning a view when possible.
    * ``index_dtype`` is the signed integer type used for flat addresses.
      Coefficient products that do not fit raise ``IndexOverflow``.
    """

    order: str = "row"
    copy: bool = False
    index_dtype: str = "intp"

    def normalized(self) -> "IndexingConfig":
        order = normalize_order(self.order or "row")
        index_dtype = (self.index_dtype or "intp").lower()
        if index_dtype not in _INDEX_DTYPES:
            raise ValueError(f"Unsupported index dtype: {self.index_dtype}")
        return replace(self, order=order, copy=bool(self.copy), index_dtype=index_dtype)

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.index_dtype)


def resolve_config(config: Optional[IndexingConfig]) -> IndexingConfig:
    return (config or IndexingConfig()).normalized()
