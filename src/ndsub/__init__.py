from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _load_version

from .core.config import IndexingConfig
from .core.containers import dim, dims, element_type, ncol, nrow, rank
from .core.derived import (
    columns,
    map_columns,
    map_rows,
    pref,
    reshape,
    rows,
    transpose,
    which,
)
from .core.exceptions import (
    IncompatibleDimensions,
    IndexOutOfRange,
    IndexOverflow,
    IndexParseError,
    InvalidIndexSpecification,
    InvalidRangeDirection,
    MissingDimension,
    NdsubError,
    NotAMatrix,
    TraversalExhausted,
    UnsupportedContainer,
)
from .core.parser import parse_index, parse_subscript
from .core.resolver import resolve
from .core.specs import ALL, as_spec, cat, mask, nested, rev, rng, scalar, vector
from .core.subset import assign, sub
from .core.traversal import Traversal

try:
    __version__ = _load_version("ndsub")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "sub",
    "assign",
    "dims",
    "dim",
    "rank",
    "element_type",
    "nrow",
    "ncol",
    "reshape",
    "transpose",
    "rows",
    "columns",
    "map_rows",
    "map_columns",
    "pref",
    "which",
    "ALL",
    "as_spec",
    "scalar",
    "mask",
    "vector",
    "rng",
    "rev",
    "cat",
    "nested",
    "resolve",
    "parse_index",
    "parse_subscript",
    "Traversal",
    "IndexingConfig",
    "NdsubError",
    "IncompatibleDimensions",
    "IndexOutOfRange",
    "InvalidIndexSpecification",
    "InvalidRangeDirection",
    "MissingDimension",
    "NotAMatrix",
    "IndexOverflow",
    "UnsupportedContainer",
    "TraversalExhausted",
    "IndexParseError",
    "__version__",
]
