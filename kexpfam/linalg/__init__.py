from .solvers import SVDSolveResult, svd_lstsq
from .utils import add_diag_jitter

__all__ = ["SVDSolveResult", "svd_lstsq", "add_diag_jitter"]
