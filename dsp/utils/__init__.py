"""
Utility modules for the LTI filter engine
"""

from .polynomials import (
    poly_multiply,
    poly_add,
    poly_roots,
    poly_from_roots,
    split_conjugates,
    nearest_root_index
)

__all__ = [
    'poly_multiply',
    'poly_add',
    'poly_roots',
    'poly_from_roots',
    'split_conjugates',
    'nearest_root_index'
]
