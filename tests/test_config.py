import numpy as np
import pytest

from ndsub import IndexingConfig, IndexOverflow, sub
from ndsub.core.subset import select


def test_config_normalization_handles_order_aliases():
    cfg = IndexingConfig(order="F", copy=1, index_dtype="INT32").normalized()
    assert cfg.order == "column"
    assert cfg.copy is True
    assert cfg.index_dtype == "int32"
    assert cfg.dtype == np.dtype(np.int32)
    assert IndexingConfig(order="C").normalized().order == "row"


def test_config_rejects_unknown_values():
    with pytest.raises(ValueError, match="Unsupported flattening order"):
        IndexingConfig(order="zigzag").normalized()
    with pytest.raises(ValueError, match="Unsupported index dtype"):
        IndexingConfig(index_dtype="float32").normalized()


def test_index_dtype_flows_into_addresses():
    matrix = np.arange(6).reshape(2, 3)
    selection = select(matrix, [0, None], IndexingConfig(index_dtype="int32"))
    assert selection.addresses().dtype == np.int32
    assert selection.shape == (3,)


def test_narrow_index_dtype_detects_overflow():
    huge = np.broadcast_to(np.zeros(1, dtype=np.int8), (2**16, 2**16))
    with pytest.raises(IndexOverflow):
        sub(huge, 0, 0, config=IndexingConfig(index_dtype="int32"))
