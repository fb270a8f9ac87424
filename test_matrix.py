import copy
import logging

import densemat
from densemat import Matrix, ShapeError
from densemat.log import PACKAGE_LOGGER, get_logger, installed_handlers, reset_logger
import numpy as np
import pytest

A = [[1, 2], [3, 4]]

def test_default_is_empty():
    m = Matrix()
    assert m.shape == (0, 0)
    assert m.height == 0 and m.width == 0
    assert m.format() == "\n"

def test_zero_filled():
    m = Matrix(2, 3)
    assert m.shape == (2, 3)
    assert all(m.get(i, j) == 0 for i in range(2) for j in range(3))

def test_from_rows():
    m = Matrix(A)
    assert m.height == 2 and m.width == 2
    assert m.tolist() == A
    assert m[1, 0] == 3

@pytest.mark.parametrize("rows", [
    [[1, 2], [3]],
    [1, 2],
    [[1, 2], 3],
    [[[1, 2]], [[3, 4]]],
])
def test_non_rectangular(rows):
    with pytest.raises(ShapeError):
        Matrix(rows)

def test_empty_rows_rejected():
    with pytest.raises(ShapeError):
        Matrix([])

@pytest.mark.parametrize("shape", [(-1, 2), (2, 1.5)])
def test_bad_dimensions(shape):
    with pytest.raises(ShapeError):
        Matrix(*shape)

def test_bad_factory_shape():
    with pytest.raises(ShapeError):
        densemat.zeros((2,))

def test_from_numpy_requires_2d():
    with pytest.raises(ShapeError):
        Matrix.from_numpy(np.zeros(3))

def test_seeded_is_reproducible():
    a = Matrix(3, 4, seed=7)
    b = Matrix(3, 4, 7)
    assert a == b
    values = a.to_numpy()
    assert np.all(values >= -1) and np.all(values < 1)
    assert a != Matrix(3, 4, seed=8)

def test_seeded_matches_explicit_generator():
    expected = Matrix(2, 5, seed=5)
    assert Matrix(2, 5, rng=np.random.default_rng(5)) == expected
    assert densemat.rand((2, 5), seed=5) == expected

def test_seeding_leaves_global_state_alone():
    np.random.seed(123)
    state = np.random.get_state()
    Matrix(4, 4, seed=99)
    after = np.random.get_state()
    assert np.array_equal(state[1], after[1])
    assert state[2] == after[2]

def test_index_checked():
    m = Matrix(2, 3)
    for row, col in [(-1, 0), (2, 0), (0, 3), (0, -1)]:
        with pytest.raises(IndexError):
            m.get(row, col)
        with pytest.raises(IndexError):
            m.set(row, col, 1.0)

def test_unchecked_access():
    m = Matrix(A)
    m.set_unchecked(1, 1, 9)
    assert m.get_unchecked(1, 1) == 9
    assert m.get(1, 1) == 9

def test_transpose_scenario():
    assert densemat.transpose(Matrix(A)) == Matrix([[1, 3], [2, 4]])

def test_transpose_shape():
    m = Matrix(2, 5, seed=1)
    t = Matrix.transpose(m)
    assert t.shape == (5, 2)
    assert all(t.get(j, i) == m.get(i, j) for i in range(2) for j in range(5))
    assert Matrix.transpose(t) == m

def test_dot_scenario():
    assert densemat.dot(Matrix(A), Matrix([[5, 6], [7, 8]])) == Matrix([[19, 22], [43, 50]])

def test_dot_identity():
    m = Matrix(3, 4, seed=11)
    assert densemat.dot(m, densemat.identity(4)) == m
    assert densemat.dot(densemat.identity(3), m) == m

def test_dot_shape_mismatch():
    with pytest.raises(ShapeError):
        densemat.dot(Matrix(2, 3), Matrix(2, 3))

def test_dot_empty_inner_dimension():
    assert densemat.dot(Matrix(2, 0), Matrix(0, 3)) == Matrix(2, 3)

def test_dot_integer_dtype():
    m = densemat.dot(Matrix(A, dtype=np.int64), Matrix(A, dtype=np.int64))
    assert m.dtype == np.int64
    assert m.tolist() == [[7, 10], [15, 22]]

def test_isub_scenario():
    a = Matrix(A)
    a -= Matrix([[1, 1], [1, 1]])
    assert a.tolist() == [[0, 1], [2, 3]]

def test_imul():
    a = Matrix(A)
    a *= Matrix([[2, 0], [1, -1]])
    assert a.tolist() == [[2, 0], [3, -4]]

def test_inplace_chaining():
    a = Matrix(A)
    ones = densemat.full((2, 2), 1)
    assert a.isub(ones).imul(a) is a
    assert a.tolist() == [[0, 1], [4, 9]]

@pytest.mark.parametrize("op", ["isub", "imul"])
def test_inplace_shape_mismatch_does_not_mutate(op):
    a = Matrix(A)
    with pytest.raises(ShapeError):
        getattr(a, op)(Matrix(3, 2))
    assert a.tolist() == A

def test_inplace_operator_shape_mismatch():
    a = Matrix(A)
    with pytest.raises(ShapeError):
        a -= Matrix(2, 3)
    with pytest.raises(ShapeError):
        a *= Matrix(1, 2)

def test_copy_independence():
    m = Matrix(A)
    for c in (Matrix(m), m.copy(), copy.copy(m), copy.deepcopy(m)):
        c.set(0, 0, 100)
        assert m.get(0, 0) == 1

def test_assign():
    target = Matrix(3, 3)
    source = Matrix(A)
    assert target.assign(source) is target
    assert target == source
    target.set(0, 0, -1)
    assert source.get(0, 0) == 1

def test_self_assign_is_noop():
    m = Matrix(A)
    assert m.assign(m) is m
    assert m.tolist() == A

def test_print(capsys):
    Matrix([[1, -2.5], [0, 0.1234]]).print()
    assert capsys.readouterr().out == " +1.000 -2.500\n +0.000 +0.123\n\n"

def test_format_precision():
    assert Matrix([[1, -2.5]]).format(1) == " +1.0 -2.5\n\n"

def test_unhashable():
    with pytest.raises(TypeError):
        hash(Matrix(A))

def test_logger_configured_once():
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    get_logger("densemat.test")
    before = list(package_logger.handlers)
    get_logger("densemat.test")
    assert package_logger.handlers == before
    assert len(installed_handlers()) == 1

def test_reset_logger_reconfigures():
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    old = installed_handlers()
    reset_logger()
    assert installed_handlers() == []
    assert not any(h in package_logger.handlers for h in old)
    try:
        get_logger("densemat.test", level="DEBUG")
        assert package_logger.level == logging.DEBUG
        (handler,) = installed_handlers()
        assert handler in package_logger.handlers
    finally:
        reset_logger()
        get_logger()

def test_negative_seed():
    a = Matrix(2, 2, seed=-5)
    assert a == Matrix(2, 2, -5)
    values = a.to_numpy()
    assert np.all(values >= -1) and np.all(values < 1)

def test_seed_rejected_outside_shape_constructor():
    with pytest.raises(TypeError):
        Matrix(Matrix(A), seed=3)
    with pytest.raises(TypeError):
        Matrix(A, rng=np.random.default_rng(1))
    with pytest.raises(TypeError):
        Matrix(seed=3)

def test_seed_given_twice():
    with pytest.raises(TypeError):
        Matrix(2, 2, 3, seed=4)

def test_seeded_integer_dtype_rejected():
    with pytest.raises(ValueError):
        Matrix(2, 2, seed=3, dtype=np.int64)

def test_inplace_dtype_mismatch():
    a = Matrix(A, dtype=np.int64)
    b = densemat.full((2, 2), 0.5)
    for op in ("isub", "imul", "iadd"):
        with pytest.raises(ValueError, match=op[1:4]):
            getattr(a, op)(b)
    assert a.tolist() == A

def test_binary_ops_promote():
    a = Matrix(A, dtype=np.int64)
    b = densemat.full((2, 2), 0.5)
    assert (a - b).tolist() == [[0.5, 1.5], [2.5, 3.5]]
    assert (a * b).dtype == np.float64
