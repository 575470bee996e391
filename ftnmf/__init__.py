"""
ftnmf: Fixed-Template Non-negative Matrix Factorization

Estimates the activations of a fixed library of templates in an input using
multiplicative updates that minimize the beta-divergence.
"""

# To get sub-modules
from .exceptions import DegenerateInputError, ShapeMismatchError
from .models import FixedTemplateNMF, solve

__version__ = "0.1.0"

__all__ = [
    "FixedTemplateNMF",
    "solve",
    "ShapeMismatchError",
    "DegenerateInputError",
]
