import numpy as np
import pytest

from ndsub import (
    ALL,
    IncompatibleDimensions,
    IndexOutOfRange,
    UnsupportedContainer,
    assign,
    rev,
    rng,
    sub,
)
from ndsub.core.subset import SourceKind, source_kind


@pytest.fixture
def matrix():
    return np.arange(12).reshape(3, 4)


def test_broadcast_scalar(matrix):
    returned = assign(matrix, -1, ALL, rng(1, 3))
    assert returned == -1
    assert matrix.tolist() == [[0, -1, -1, 3], [4, -1, -1, 7], [8, -1, -1, 11]]


def test_matching_container(matrix):
    block = np.array([[100, 101], [102, 103]])
    assign(matrix, block, rev(rng(0, 2)), [3, 0])
    assert matrix[1, 3] == 100
    assert matrix[1, 0] == 101
    assert matrix[0, 3] == 102
    assert matrix[0, 0] == 103


def test_flat_sequence_into_rank_one_selection(matrix):
    assign(matrix, [9, 8, 7], ALL, 2)
    assert matrix[:, 2].tolist() == [9, 8, 7]


def test_single_element(matrix):
    assign(matrix, 42, -1, -1)
    assert matrix[2, 3] == 42


def test_shape_mismatch_leaves_target_untouched(matrix):
    before = matrix.copy()
    with pytest.raises(IncompatibleDimensions) as excinfo:
        assign(matrix, np.zeros((2, 2), dtype=int), rng(0, 2), rng(0, 3))
    assert excinfo.value.expected == (2, 3)
    assert excinfo.value.actual == (2, 2)
    assert np.array_equal(matrix, before)


def test_flat_sequence_needs_rank_one_and_matching_length(matrix):
    before = matrix.copy()
    with pytest.raises(IncompatibleDimensions):
        assign(matrix, [1, 2, 3, 4, 5, 6], rng(0, 2), rng(0, 3))
    with pytest.raises(IncompatibleDimensions):
        assign(matrix, [1, 2], ALL, 0)
    assert np.array_equal(matrix, before)


def test_out_of_range_is_detected_before_writing(matrix):
    before = matrix.copy()
    with pytest.raises(IndexOutOfRange):
        assign(matrix, 0, [0, 5], ALL)
    assert np.array_equal(matrix, before)


def test_round_trip_leaves_array_unchanged(matrix):
    before = matrix.copy()
    specs = (rev(ALL), [3, 1, 1])
    assign(matrix, sub(matrix, *specs), *specs)
    assert np.array_equal(matrix, before)


def test_fortran_ordered_target(matrix):
    fortran = np.asfortranarray(matrix)
    assign(fortran, np.array([50, 60]), 1, rng(2, 4))
    assert fortran[1].tolist() == [4, 5, 50, 60]


def test_non_contiguous_view_writes_through(matrix):
    view = matrix[:, ::2]
    assign(view, 0, ALL, 1)
    assert matrix[:, 2].tolist() == [0, 0, 0]


def test_list_target():
    seq = list(range(6))
    assign(seq, "x", rng(0, 0, 2))
    assert seq == ["x", 1, "x", 3, "x", 5]
    assign(seq, (10, 11), [1, 3])
    assert seq == ["x", 10, "x", 11, "x", 5]
    assign(seq, np.array([7, 8]), rev([4, 5]))
    assert seq[4:] == [8, 7]


def test_immutable_sequence_is_rejected():
    with pytest.raises(UnsupportedContainer):
        assign((1, 2, 3), 0, 0)


def test_source_kind_dispatch():
    assert source_kind(3, 1) is SourceKind.SCALAR
    assert source_kind(np.array(3), 1) is SourceKind.SCALAR
    assert source_kind(np.zeros(2), 1) is SourceKind.CONTAINER
    assert source_kind([1, 2], 1) is SourceKind.SEQUENCE
    assert source_kind("text", 1) is SourceKind.SCALAR
    assert source_kind([1, 2], 0) is SourceKind.SCALAR
