import numpy as np
import pytest

from ndsub import IncompatibleDimensions, Traversal, TraversalExhausted
from ndsub.core.affine import compute_coefficients
from ndsub.core.resolver import IndexVector, ScalarAddr, StridedRange


def test_traversal_is_last_axis_fastest():
    traversal = Traversal(
        [StridedRange(0, 2, 1), StridedRange(0, 3, 1)], compute_coefficients((2, 3))
    )
    assert list(traversal) == [0, 1, 2, 3, 4, 5]
    assert traversal.done


def test_traversal_uses_offset_and_mixed_specs():
    # rows 2 and 0 of a 3x4 matrix, columns 3, 1
    traversal = Traversal(
        [IndexVector((2, 0)), StridedRange(3, 2, -2)], [4, 1], offset=0
    )
    assert list(traversal) == [11, 9, 3, 1]


def test_step_reports_done_with_last_address():
    traversal = Traversal([StridedRange(0, 2, 1)], [1], offset=10)
    assert traversal.state == "init"
    assert traversal.step() == (10, False)
    assert traversal.state == "iterating"
    assert traversal.step() == (11, True)
    assert traversal.state == "done"


def test_next_index_after_done_raises():
    traversal = Traversal([StridedRange(0, 1, 1)], [1])
    traversal.next_index()
    with pytest.raises(TraversalExhausted):
        traversal.next_index()
    with pytest.raises(StopIteration):
        next(traversal)


def test_scalar_only_traversal_yields_offset_once():
    traversal = Traversal([], [], offset=7)
    assert not traversal.done
    assert traversal.next_index() == 7
    assert traversal.done


def test_empty_axis_is_done_immediately():
    traversal = Traversal([StridedRange(0, 3, 1), StridedRange(0, 0, 1)], [5, 1])
    assert traversal.done
    assert traversal.addresses().size == 0


def test_counters_reset_after_completion():
    traversal = Traversal([StridedRange(0, 2, 1), StridedRange(0, 2, 1)], [2, 1])
    list(traversal)
    assert traversal.counters == [0, 0]


def test_cumulative_cache_is_reused_for_prefix():
    traversal = Traversal(
        [StridedRange(0, 2, 1), StridedRange(0, 2, 1), StridedRange(0, 3, 1)],
        compute_coefficients((2, 2, 3)),
    )
    traversal.next_index()
    # only the last axis moved, so the first two partial sums stay valid
    assert traversal.valid_end == 2
    for _ in range(2):
        traversal.next_index()
    # the middle axis carried
    assert traversal.valid_end == 1
    assert traversal.cumsum[:2] == [0, 0]


def test_scalar_axes_inside_traversal_are_constant():
    traversal = Traversal([ScalarAddr(1), StridedRange(0, 3, 1)], compute_coefficients((2, 3)))
    assert traversal.shape == (3,)
    assert list(traversal) == [3, 4, 5]


def test_mismatched_coefficients_are_rejected():
    with pytest.raises(IncompatibleDimensions):
        Traversal([StridedRange(0, 2, 1)], [1, 1])


def test_over_shape_row_and_column_order():
    assert list(Traversal.over_shape((2, 3))) == [0, 1, 2, 3, 4, 5]
    assert list(Traversal.over_shape((2, 3), order="column")) == [0, 3, 1, 4, 2, 5]
    assert list(Traversal.over_shape((2, 3), reverse_axes=True)) == [0, 3, 1, 4, 2, 5]


def test_over_shape_column_order_matches_numpy_fortran_ravel():
    arr = np.arange(24).reshape(2, 3, 4)
    addresses = Traversal.over_shape(arr.shape, order="column").addresses()
    assert np.array_equal(arr.reshape(-1)[addresses], arr.ravel(order="F"))


def test_addresses_respect_index_dtype():
    addresses = Traversal.over_shape((2, 2)).addresses(np.int32)
    assert addresses.dtype == np.int32
    assert addresses.tolist() == [0, 1, 2, 3]
