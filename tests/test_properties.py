import numpy as np
import pytest

from ndsub import ALL, assign, reshape, rev, rng, sub
from ndsub.core.affine import compute_coefficients
from ndsub.core.traversal import Traversal

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import given  # noqa: E402
from hypothesis import strategies as st  # noqa: E402


@st.composite
def shapes(draw, min_rank=1, max_rank=3):
    return tuple(
        draw(st.lists(st.integers(min_value=1, max_value=4), min_size=min_rank, max_size=max_rank))
    )


@st.composite
def axis_specs(draw, dimension):
    # Spec together with the numpy index that selects the same positions
    kind = draw(st.sampled_from(["all", "scalar", "vector", "range", "rev"]))
    if kind == "all":
        return ALL, slice(None)
    if kind == "scalar":
        position = draw(st.integers(min_value=-dimension, max_value=dimension - 1))
        return position, position
    if kind == "vector":
        values = draw(
            st.lists(st.integers(min_value=-dimension, max_value=dimension - 1), max_size=4)
        )
        return values, np.array(values, dtype=np.intp)
    if kind == "range":
        start = draw(st.integers(min_value=0, max_value=dimension - 1))
        stop = draw(st.integers(min_value=start + 1, max_value=dimension))
        step = draw(st.integers(min_value=1, max_value=3))
        return rng(start, stop, step), np.arange(start, stop, step)
    return rev(ALL), np.arange(dimension - 1, -1, -1)


@st.composite
def selections(draw):
    shape = draw(shapes())
    pairs = [draw(axis_specs(d)) for d in shape]
    return shape, [spec for spec, _ in pairs], [index for _, index in pairs]


def _numpy_subset(array, indices):
    # Apply one axis at a time so vector indices combine as an outer product
    result = array
    axis = 0
    for index in indices:
        if isinstance(index, int):
            result = np.take(result, index, axis=axis)
        else:
            result = result[(slice(None),) * axis + (index,)]
            axis += 1
    return result


@given(selections())
def test_sub_matches_numpy_outer_indexing(draw_input):
    shape, specs, indices = draw_input
    array = np.arange(int(np.prod(shape))).reshape(shape)
    expected = _numpy_subset(array, indices)
    result = sub(array, *specs)
    assert np.array_equal(np.asarray(result), expected)


@given(selections())
def test_assigning_a_subset_back_is_identity(draw_input):
    shape, specs, _ = draw_input
    array = np.arange(int(np.prod(shape))).reshape(shape)
    before = array.copy()
    assign(array, sub(array, *specs), *specs)
    assert np.array_equal(array, before)


@given(shapes(max_rank=4))
def test_row_major_traversal_enumerates_storage(shape):
    addresses = Traversal.over_shape(shape).addresses()
    assert addresses.tolist() == list(range(int(np.prod(shape))))


@given(shapes(max_rank=4))
def test_column_major_traversal_matches_fortran_ravel(shape):
    array = np.arange(int(np.prod(shape))).reshape(shape)
    addresses = Traversal.over_shape(shape, "column", compute_coefficients(shape)).addresses()
    assert np.array_equal(array.reshape(-1)[addresses], array.ravel(order="F"))


@given(shapes(), st.sampled_from(["row", "column"]))
def test_reshape_preserves_flattened_order(shape, order):
    array = np.arange(int(np.prod(shape))).reshape(shape)
    numpy_order = "C" if order == "row" else "F"
    target = tuple(reversed(shape))
    result = reshape(array, target, order=order)
    assert result.shape == target
    assert np.array_equal(result.ravel(order=numpy_order), array.ravel(order=numpy_order))
