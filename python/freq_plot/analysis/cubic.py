"""
Cubic fit through four equally spaced samples.

Given f(0)=y0, f(1)=y1, f(2)=y2 and f(3)=y3 there is exactly one polynomial
of degree three through the points. The analyst uses it to read the curve
between bins and to place peaks with sub-bin precision.
"""
import math

# Returned as the position by cubic_maximize when the cubic has no maximum
NO_MAXIMUM = -1.0


def _coefficients(y0, y1, y2, y3):
    a = y0 / -6.0 + y1 / 2.0 - y2 / 2.0 + y3 / 6.0
    b = y0 - 5.0 * y1 / 2.0 + 2.0 * y2 - y3 / 2.0
    c = -11.0 * y0 / 6.0 + 3.0 * y1 - 3.0 * y2 / 2.0 + y3 / 3.0
    d = y0
    return a, b, c, d


def _evaluate(a, b, c, d, x):
    return ((a * x + b) * x + c) * x + d


def cubic_interpolate(y0, y1, y2, y3, x) -> float:
    """
    Value of the cubic through the four samples at position x.

    x is usually within [0, 3] but is not clamped.
    """
    a, b, c, d = _coefficients(float(y0), float(y1), float(y2), float(y3))
    return _evaluate(a, b, c, d, float(x))


def cubic_maximize(y0, y1, y2, y3) -> tuple[float, float]:
    """
    Locate the local maximum of the cubic through the four samples.

    The derivative is a quadratic; of its two roots the one with a negative
    second derivative is the maximum.

    Returns:
        (x, value): position of the maximum relative to y0 and the cubic's
        value there, or (NO_MAXIMUM, 0.0) when the cubic has no local
        maximum (complex roots, or a derivative without a falling root).
    """
    a, b, c, d = _coefficients(float(y0), float(y1), float(y2), float(y3))

    # Derivative: da*x^2 + db*x + dc
    da = 3.0 * a
    db = 2.0 * b
    dc = c

    if da == 0.0:
        # Quadratic (or flatter) data: derivative is linear
        if db >= 0.0:
            return NO_MAXIMUM, 0.0
        x = -dc / db
        return x, _evaluate(a, b, c, d, x)

    discriminant = db * db - 4.0 * da * dc
    if discriminant < 0.0:
        return NO_MAXIMUM, 0.0

    # Cancellation-free form of (-db +- sqrt(discriminant)) / (2 * da)
    q = -0.5 * (db + math.copysign(math.sqrt(discriminant), db))
    if q == 0.0:
        # Double root at zero: an inflection, not a maximum
        return NO_MAXIMUM, 0.0
    x1 = q / da
    x2 = dc / q

    # Second derivative: 2*da*x + db
    if 2.0 * da * x1 + db < 0.0:
        x = x1
    else:
        x = x2
    if 2.0 * da * x + db >= 0.0:
        # Double root: an inflection, not a maximum
        return NO_MAXIMUM, 0.0
    return x, _evaluate(a, b, c, d, x)
