"""
Solver backends. Each subpackage adapts cost functions to one solver library
and is imported explicitly, e.g. ``from pose_factors.backends.gtsam import get_custom_factor``.
"""
