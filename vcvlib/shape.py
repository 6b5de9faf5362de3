from typing import Union
from numbers import Integral, Real
import numpy as np
from scipy.optimize import brentq

from .errors import InvalidDimension, InvalidShape, InvalidMinThickness


# ---------------------------------- input validation ----------------------------------
def check_dimensions(dimensions) -> int:
    """Check that dimensions is an integer >= 1 and return it as an int"""
    if isinstance(dimensions, bool) or not isinstance(dimensions, Integral):
        raise InvalidDimension(dimensions, "an integer >= 1")
    if dimensions < 1:
        raise InvalidDimension(dimensions, "an integer >= 1")
    return int(dimensions)


def check_min_thickness(min_thickness) -> float:
    """Check that min_thickness is a float in [0, 1) and return it as a float"""
    if isinstance(min_thickness, bool) or not isinstance(min_thickness, Real):
        raise InvalidMinThickness(min_thickness, "a float in [0, 1)")
    if not (0 <= min_thickness < 1):
        raise InvalidMinThickness(min_thickness, "a float in [0, 1)")
    return float(min_thickness)


def check_shape(shape, allow_extrapolation: bool = False) -> float:
    """
    Check that shape is a valid roundness request and return it as a float

    Roundness must be in [0, 1] unless allow_extrapolation=True, in which case any
    roundness >= 0 is accepted (values above 1 map onto a negative lambda).
    """
    if isinstance(shape, bool) or not isinstance(shape, Real) or np.isnan(shape):
        raise InvalidShape(shape, "a real number")
    if allow_extrapolation:
        if not (0 <= shape < np.inf):
            raise InvalidShape(shape, "a finite number >= 0 (with extrapolation)")
    elif not (0 <= shape <= 1):
        raise InvalidShape(shape, "a number in [0, 1]")
    return float(shape)


# ---------------------------------- roundness <-> lambda ----------------------------------
def roundness_from_lambda(lam: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Measure the roundness of an exponential decay spectrum with rate lam.

    The roundness is the area under the curve exp(-2 * lam * t) for t in [0, 1], which is
    what the roundness recovery statistic converges to as the number of dimensions grows
    (the diagonal of the vcv holds squared axis lengths, hence the factor of 2).

    Parameters
    ----------
    lam : float or np.ndarray
        The decay rate(s). 0 is a perfect sphere, np.inf is a line.

    Returns
    -------
    float or np.ndarray
        The roundness, 1 for lam=0 and 0 for lam=np.inf (matches the shape of lam).
    """
    lam = np.asarray(lam, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        roundness = -np.expm1(-2 * lam) / (2 * lam)
    roundness = np.where(lam == 0, 1.0, roundness)
    roundness = np.where(np.isposinf(lam), 0.0, roundness)
    if roundness.ndim == 0:
        return float(roundness)
    return roundness


def lambda_from_roundness(roundness: float, allow_extrapolation: bool = False, xtol: float = 1e-12) -> float:
    """
    Find the decay rate lambda whose exponential spectrum has the requested roundness.

    This inverts roundness_from_lambda numerically. The endpoints are handled as limits
    rather than evaluated: a roundness of 1 returns 0 and a roundness of 0 returns np.inf.

    Parameters
    ----------
    roundness : float
        Requested roundness in [0, 1] (1 is a sphere, 0 is a line).
    allow_extrapolation : bool
        If True, will accept roundness > 1 which returns a negative lambda.
        (default is False)
    xtol : float
        Absolute tolerance of the root finder. (default is 1e-12)

    Returns
    -------
    float
        The decay rate lambda.
    """
    roundness = check_shape(roundness, allow_extrapolation=allow_extrapolation)

    if roundness == 1:
        return 0.0
    if roundness == 0:
        return np.inf

    # roundness_from_lambda is strictly decreasing, so bracket the root and use brent's method
    if roundness < 1:
        # f(lam) < 1 / (2 * lam) so f(1 / (2 * r)) < r
        lower, upper = 0.0, 1 / (2 * roundness) + 1
    else:
        # f(-x) > r for x = log(1 + 2r)
        lower, upper = -np.log1p(2 * roundness), 0.0

    return float(brentq(lambda lam: roundness_from_lambda(lam) - roundness, lower, upper, xtol=xtol))


# ---------------------------------- spectrum generator ----------------------------------
def generate_shape(dimensions: int, lam: float, min_thickness: float = 0.0) -> np.ndarray:
    """
    Generate the relative axis lengths of an ellipsoid from an exponential decay.

    axis[i] = exp(-lam * i / (dimensions - 1)) for i in range(dimensions), so the first
    axis always has length 1 and the rest decay toward 0 (or stay at 1 if lam == 0).

    Parameters
    ----------
    dimensions : int
        Number of axes (>= 1).
    lam : float
        Decay rate of the spectrum. Usually >= 0, np.inf produces a line. Negative values
        only come from extrapolated roundness requests and produce growing axes.
    min_thickness : float
        Floor applied to every axis length, in [0, 1). (default is 0)

    Returns
    -------
    np.ndarray
        The axis lengths, shape (dimensions,).
    """
    dimensions = check_dimensions(dimensions)
    min_thickness = check_min_thickness(min_thickness)
    if isinstance(lam, bool) or not isinstance(lam, Real) or np.isnan(lam) or np.isneginf(lam):
        raise ValueError(f"lam must be a real number or np.inf, got {lam!r}")

    if dimensions == 1:
        return np.ones(1)

    if np.isposinf(lam):
        spectrum = np.zeros(dimensions)
    else:
        position = np.linspace(0, 1, dimensions)
        spectrum = np.exp(-lam * position)

    # the reference axis, set directly so that lam=np.inf doesn't produce exp(nan)
    spectrum[0] = 1.0

    return np.maximum(spectrum, min_thickness)
