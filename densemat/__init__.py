from densemat.errors import ShapeError
from densemat.matrix import Matrix, dot, full, identity, rand, transpose, zeros

__all__ = ["Matrix", "ShapeError", "dot", "full", "identity", "rand", "transpose", "zeros"]
__version__ = "1.0.0"
