"""
Filter design helpers: second-order-section decomposition.
"""

from .sos_codec import tf_to_sos, sos_to_tf, sos_to_array, sos_from_array

__all__ = ['tf_to_sos', 'sos_to_tf', 'sos_to_array', 'sos_from_array']
