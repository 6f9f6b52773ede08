"""
Utils package for validation, JAX setup and pose conversions.
"""

__all__ = []

# Utilities are imported explicitly as needed to avoid namespace pollution
# Example usage:
#   from pose_factors.utils.transformations import get_se3_vector_from_matrix
#   from pose_factors.utils.validation import array_shape_validator
