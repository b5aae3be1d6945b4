from .base import Kernel
from .gaussian import GaussianKernel

__all__ = ["Kernel", "GaussianKernel"]
