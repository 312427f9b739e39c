"""Approximate floating-point comparison.

All equality checks in the kernel (tuples, matrices, point/vector tests,
invertibility) go through these helpers so that they share a single
threshold.
"""

# Absolute tolerance used for every approximate comparison
EPSILON = 1e-4


def approx_equal(a: float, b: float) -> bool:
    """Check whether two floats are equal within EPSILON.

    Args:
        a: First value.
        b: Second value.

    Returns:
        True if |a - b| < EPSILON.
    """
    return a - b < EPSILON and b - a < EPSILON


def near_zero(a: float) -> bool:
    """Check whether a float is within EPSILON of zero."""
    return approx_equal(a, 0.0)
