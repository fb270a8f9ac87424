"""
Dense row-major matrix.

Storage is a single contiguous numpy buffer of ``height * width`` elements,
element ``(row, col)`` living at ``row * width + col``. Every Matrix owns its
buffer; nothing handed out by this module aliases it.
"""
import operator
import sys
from collections.abc import Sized

import numpy as np

from densemat.config import DEFAULT_DTYPE, DEFAULT_PRECISION
from densemat.errors import ShapeError
from densemat.log import get_logger

logger = get_logger(__name__)


def _dim(value) -> int:
    try:
        n = operator.index(value)
    except TypeError:
        raise ShapeError(f"Matrix dimension must be an integer, got {value!r}") from None
    if n < 0:
        raise ShapeError(f"Matrix dimension must be non-negative, got {n}")
    return n


def _shape(shape) -> tuple:
    try:
        height, width = shape
    except (TypeError, ValueError):
        raise ShapeError(f"Shape must be a (height, width) pair, got {shape!r}") from None
    return _dim(height), _dim(width)


def _uniform(rng: np.random.Generator, size: int) -> np.ndarray:
    # [-1, 1), drawn in row-major order
    return 2 * rng.random(size) - 1


def _from_rows(rows, dtype):
    try:
        height = len(rows)
    except TypeError:
        raise ShapeError(f"Expected a nested sequence, got {type(rows).__name__}") from None
    if height == 0:
        raise ShapeError("Cannot build a matrix from an empty sequence")
    width = None
    flat = []
    for i, row in enumerate(rows):
        try:
            n = len(row)
        except TypeError:
            raise ShapeError(f"Row {i} is not a sequence: {row!r}") from None
        if width is None:
            width = n
        if n != width:
            logger.debug("Row %d has length %d, expected %d", i, n, width)
            raise ShapeError(f"Non rectangular input: row {i} has length {n}, expected {width}")
        for value in row:
            if isinstance(value, Sized) and not isinstance(value, str):
                raise ShapeError(f"Row {i} holds a nested sequence; only 2D input is accepted")
        flat.extend(row)
    data = np.array(flat, dtype=dtype)
    if data.shape != (height * width,):
        raise ShapeError(f"Expected {height * width} scalar elements, got array of shape {data.shape}")
    return height, width, data


class Matrix:
    """
    A 2D numeric matrix.

    Matrix()                          empty 0x0 matrix
    Matrix(height, width)             zero-filled
    Matrix(height, width, seed)       uniform [-1, 1) from a generator seeded with `seed`
    Matrix(height, width, rng=gen)    uniform [-1, 1) drawn from `gen`
    Matrix([[1, 2], [3, 4]])          copied from a rectangular nested sequence
    Matrix(other)                     deep copy of another Matrix
    """

    __slots__ = ("_height", "_width", "_data")
    __hash__ = None

    def __init__(self, *args, seed: int = 0, rng: np.random.Generator = None, dtype=None):
        if len(args) == 3:
            if seed:
                raise TypeError("Matrix() got seed both positionally and by keyword")
            seed = args[2]
        if (seed or rng is not None) and len(args) not in (2, 3):
            raise TypeError("seed and rng only apply to Matrix(height, width)")

        if len(args) == 1 and isinstance(args[0], Matrix):
            src = args[0]
            self._height, self._width = src._height, src._width
            self._data = src._data.astype(dtype if dtype is not None else src._data.dtype, copy=True)
            return

        dtype = np.dtype(dtype) if dtype is not None else DEFAULT_DTYPE
        if not args:
            self._height, self._width = 0, 0
            self._data = np.empty(0, dtype=dtype)
        elif len(args) == 1:
            self._height, self._width, self._data = _from_rows(args[0], dtype)
        elif len(args) in (2, 3):
            height, width = _dim(args[0]), _dim(args[1])
            size = height * width
            if rng is None and seed:
                logger.debug("Seeding private generator with %r for %dx%d matrix", seed, height, width)
                # unsigned 32-bit, as srand() takes it
                rng = np.random.default_rng(operator.index(seed) & 0xFFFFFFFF)
            if rng is not None:
                if not np.issubdtype(dtype, np.inexact):
                    raise ValueError(f"Random fill needs a floating dtype, got {dtype}")
                data = _uniform(rng, size).astype(dtype)
            else:
                data = np.zeros(size, dtype=dtype)
            self._height, self._width, self._data = height, width, data
        else:
            raise TypeError(f"Matrix() takes at most 3 positional arguments ({len(args)} given)")

    @classmethod
    def _wrap(cls, height: int, width: int, data: np.ndarray) -> "Matrix":
        """Adopt `data` as the buffer of a new matrix; the caller must not keep it."""
        m = cls.__new__(cls)
        m._height, m._width, m._data = height, width, data
        return m

    @classmethod
    def from_numpy(cls, array) -> "Matrix":
        array = np.asarray(array)
        if array.ndim != 2:
            raise ShapeError(f"Expected a 2D array, got {array.ndim}D")
        return cls._wrap(array.shape[0], array.shape[1], array.reshape(-1).copy())

    # static

    @staticmethod
    def transpose(src: "Matrix") -> "Matrix":
        """Return a new matrix that is the transposition of `src`."""
        grid = src._data.reshape(src._height, src._width)
        return Matrix._wrap(src._width, src._height, grid.T.reshape(-1).copy())

    @staticmethod
    def dot(lhs: "Matrix", rhs: "Matrix") -> "Matrix":
        """
        Matrix product of `lhs` and `rhs`.

        Each element is accumulated from zero as ``sum += lhs[r, k] * rhs[k, c]``
        for k in increasing order, in the promoted element dtype.
        """
        if lhs._width != rhs._height:
            raise ShapeError(
                f"Invalid matrix dimensions for dot multiplication: {lhs.shape} vs {rhs.shape}")
        a = lhs._data.reshape(lhs._height, lhs._width)
        b = rhs._data.reshape(rhs._height, rhs._width)
        out = np.zeros((lhs._height, rhs._width), dtype=np.result_type(a, b))
        for k in range(lhs._width):
            out += np.outer(a[:, k], b[k, :])
        return Matrix._wrap(lhs._height, rhs._width, out.reshape(-1))

    # shape

    @property
    def height(self) -> int:
        return self._height

    @property
    def width(self) -> int:
        return self._width

    nrows = height
    ncols = width

    @property
    def shape(self) -> tuple:
        return self._height, self._width

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def T(self) -> "Matrix":
        return Matrix.transpose(self)

    def __len__(self):
        return self._height

    # element access

    def _offset(self, row, col) -> int:
        row, col = operator.index(row), operator.index(col)
        if not 0 <= row < self._height or not 0 <= col < self._width:
            raise IndexError(f"Index ({row}, {col}) out of range for {self._height}x{self._width} matrix")
        return row * self._width + col

    def get(self, row: int, col: int):
        return self._data[self._offset(row, col)].item()

    def set(self, row: int, col: int, value) -> None:
        self._data[self._offset(row, col)] = value

    def get_unchecked(self, row: int, col: int):
        # out-of-range indices are undefined behaviour
        return self._data[row * self._width + col].item()

    def set_unchecked(self, row: int, col: int, value) -> None:
        self._data[row * self._width + col] = value

    def __getitem__(self, key):
        row, col = key
        return self.get(row, col)

    def __setitem__(self, key, value):
        row, col = key
        self.set(row, col, value)

    def fill(self, value) -> None:
        self._data.fill(value)

    # copy / assign

    def copy(self) -> "Matrix":
        return Matrix._wrap(self._height, self._width, self._data.copy())

    __copy__ = copy

    def __deepcopy__(self, memo):
        return self.copy()

    def assign(self, other: "Matrix") -> "Matrix":
        """Replace this matrix's shape and contents with a deep copy of `other`."""
        if other is self:
            return self
        if not isinstance(other, Matrix):
            raise ValueError(f"Cannot assign {type(other).__name__} to Matrix")
        data = other._data.copy()
        self._height, self._width, self._data = other._height, other._width, data
        return self

    # elementwise

    def _check_operand(self, other, what: str) -> None:
        if not isinstance(other, Matrix):
            raise ValueError(f"Element-wise {what} expects a Matrix, got {type(other).__name__}")
        if self.shape != other.shape:
            raise ShapeError(
                f"Invalid matrix dimensions for element-wise {what}: {self.shape} vs {other.shape}")

    def _check_inplace(self, other, what: str) -> None:
        self._check_operand(other, what)
        if not np.can_cast(other.dtype, self.dtype, casting="same_kind"):
            raise ValueError(
                f"Cannot {what} {other.dtype} matrix into {self.dtype} matrix in place")

    def isub(self, other: "Matrix") -> "Matrix":
        self._check_inplace(other, "subtract")
        self._data -= other._data
        return self

    def imul(self, other: "Matrix") -> "Matrix":
        self._check_inplace(other, "multiply")
        self._data *= other._data
        return self

    def iadd(self, other: "Matrix") -> "Matrix":
        self._check_inplace(other, "add")
        self._data += other._data
        return self

    __isub__ = isub
    __imul__ = imul
    __iadd__ = iadd

    def _promoted_copy(self, other, what: str) -> "Matrix":
        self._check_operand(other, what)
        return Matrix(self, dtype=np.result_type(self.dtype, other.dtype))

    def __sub__(self, other):
        return self._promoted_copy(other, "subtract").isub(other)

    def __mul__(self, other):
        return self._promoted_copy(other, "multiply").imul(other)

    def __add__(self, other):
        return self._promoted_copy(other, "add").iadd(other)

    def __neg__(self):
        return Matrix._wrap(self._height, self._width, -self._data)

    def matmul(self, other: "Matrix") -> "Matrix":
        return Matrix.dot(self, other)

    def __matmul__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return Matrix.dot(self, other)

    # comparison / conversion

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    def allclose(self, other: "Matrix", atol: float = 1e-7) -> bool:
        if self.shape != other.shape:
            return False
        return bool(np.allclose(self._data, other._data, rtol=0.0, atol=atol))

    def to_numpy(self) -> np.ndarray:
        return self._data.reshape(self._height, self._width).copy()

    def tolist(self) -> list:
        return self._data.reshape(self._height, self._width).tolist()

    def __repr__(self):
        return f"Matrix({self._height} x {self._width})"

    def format(self, precision: int = DEFAULT_PRECISION) -> str:
        """Render row-major, one row per line, values as `` %+1.<precision>f``, then a blank line."""
        cell = f" %+1.{precision}f"
        lines = []
        for i in range(self._height):
            row = self._data[i * self._width:(i + 1) * self._width]
            lines.append("".join(cell % v for v in row.tolist()) + "\n")
        return "".join(lines) + "\n"

    def print(self, precision: int = DEFAULT_PRECISION, file=None) -> None:
        (file or sys.stdout).write(self.format(precision))


transpose = Matrix.transpose
dot = Matrix.dot


def zeros(shape, dtype=None) -> Matrix:
    height, width = _shape(shape)
    return Matrix(height, width, dtype=dtype)


def full(shape, value, dtype=None) -> Matrix:
    m = zeros(shape, dtype=dtype)
    m.fill(value)
    return m


def rand(shape, seed=None, rng: np.random.Generator = None) -> Matrix:
    """Uniform [-1, 1) matrix; a fresh generator is built from `seed` unless `rng` is given."""
    height, width = _shape(shape)
    if rng is None:
        rng = np.random.default_rng(seed)
    return Matrix(height, width, rng=rng)


def identity(n, dtype=None) -> Matrix:
    n = _dim(n)
    return Matrix._wrap(n, n, np.eye(n, dtype=dtype if dtype is not None else DEFAULT_DTYPE).reshape(-1))
