from typing import Union, Tuple
from dataclasses import dataclass, field
import numpy as np
from scipy.integrate import trapezoid

from .params import VCVParams
from .shape import generate_shape, lambda_from_roundness
from .covariance import assemble_vcv


@dataclass(frozen=True, eq=False)
class VCV:
    """
    A single ellipsoid: its variance-covariance matrix and the location of its centroid.

    Instances are immutable, the arrays are stored as read-only copies. The parameters,
    decay rate and axis spectrum that produced the matrix are kept for diagnostics.
    """

    vcv: np.ndarray
    loc: np.ndarray
    params: VCVParams = field(default_factory=VCVParams)
    lam: float = 0.0
    spectrum: np.ndarray = None

    def __post_init__(self):
        vcv = np.array(self.vcv, dtype=float)
        loc = np.array(self.loc, dtype=float)
        if vcv.ndim != 2 or vcv.shape[0] != vcv.shape[1]:
            raise ValueError(f"vcv must be a square matrix, got shape {vcv.shape}")
        if loc.shape != (vcv.shape[0],):
            raise ValueError(f"loc must have shape ({vcv.shape[0]},), got {loc.shape}")
        spectrum = np.sqrt(np.diag(vcv)) if self.spectrum is None else np.array(self.spectrum, dtype=float)
        for array in (vcv, loc, spectrum):
            array.flags.writeable = False
        object.__setattr__(self, "vcv", vcv)
        object.__setattr__(self, "loc", loc)
        object.__setattr__(self, "spectrum", spectrum)

    @property
    def dimensions(self) -> int:
        return self.vcv.shape[0]

    def __eq__(self, other) -> bool:
        if not isinstance(other, VCV):
            return NotImplemented
        return np.array_equal(self.vcv, other.vcv) and np.array_equal(self.loc, other.loc)

    def __hash__(self) -> int:
        # adding 0.0 maps -0.0 to 0.0 so equal matrices share a hash
        return hash((self.vcv.shape, (self.vcv + 0.0).tobytes(), (self.loc + 0.0).tobytes()))

    def __repr__(self) -> str:
        return f"VCV(dimensions={self.dimensions}, shape={self.params.shape}, covariance={self.params.covariance})"


def make_vcv(
    shape: float = 1.0,
    covariance: float = 0.0,
    dimensions: int = 2,
    size: Union[float, np.ndarray] = 1.0,
    position: Union[float, np.ndarray] = 0.0,
    min_thickness: float = 0.0,
    allow_extrapolation: bool = False,
    verbose: bool = False,
) -> VCV:
    """
    Make a variance-covariance matrix describing an ellipsoid.

    The defaults produce the unit, non-covarying, centered 2D circle.

    Parameters
    ----------
    shape : float
        Roundness of the ellipsoid, 1 is a hypersphere and 0 is a line. (default is 1)
    covariance : float
        Correlation strength between axes, in (-1, 1). (default is 0)
    dimensions : int
        Number of dimensions. (default is 2)
    size : float or np.ndarray
        Scaling of the axes, scalar or one value per dimension. (default is 1)
    position : float or np.ndarray
        Location of the centroid, scalar (broadcast) or one value per dimension. (default is 0)
    min_thickness : float
        Floor applied to every relative axis length, in [0, 1). (default is 0)
    allow_extrapolation : bool
        Whether shape may exceed 1. (default is False)
    verbose : bool
        If True, will print the decay rate and axis spectrum. (default is False)

    Returns
    -------
    VCV
        The ellipsoid (matrix and location).
    """
    params = VCVParams(
        shape=shape,
        covariance=covariance,
        dimensions=dimensions,
        size=size,
        position=position,
        min_thickness=min_thickness,
        allow_extrapolation=allow_extrapolation,
    )
    return make_vcv_from_params(params, verbose=verbose)


def make_vcv_from_params(params: VCVParams, verbose: bool = False) -> VCV:
    """Make a VCV from a (validated) VCVParams instance, see make_vcv for details"""
    lam = lambda_from_roundness(params.shape, allow_extrapolation=params.allow_extrapolation)
    spectrum = generate_shape(params.dimensions, lam, min_thickness=params.min_thickness)
    vcv = assemble_vcv(spectrum, params.covariance)

    # scale by size (uniform or per dimension, which keeps the matrix symmetric & PSD)
    size = np.asarray(params.size, dtype=float)
    if size.ndim == 0:
        vcv = vcv * size**2
    else:
        vcv = vcv * np.outer(size, size)

    loc = np.broadcast_to(np.asarray(params.position, dtype=float), (params.dimensions,))

    if verbose:
        print(f"shape={params.shape:.3f} -> lambda={lam:.4f}")
        print(f"axis spectrum: {np.array2string(spectrum, precision=3)}")

    return VCV(vcv=vcv, loc=loc, params=params, lam=lam, spectrum=spectrum)


def roundness_recovered(vcv: Union[VCV, np.ndarray]) -> float:
    """
    Measure the roundness of a realized vcv matrix.

    Sorts the diagonal (ascending), divides it by the variance of the reference (first)
    axis, and integrates the curve connecting (normalized index, sorted variance) with the
    trapezoidal rule. This converges to the requested shape as the number of dimensions
    grows (including extrapolated shapes above 1, whose later axes outgrow the reference)
    and is biased upward when there are only a few dimensions.

    Parameters
    ----------
    vcv : VCV or np.ndarray
        The ellipsoid or its (dimensions, dimensions) matrix.

    Returns
    -------
    float
        The recovered roundness.
    """
    matrix = vcv.vcv if isinstance(vcv, VCV) else np.asarray(vcv, dtype=float)
    diagonal = np.diag(matrix)
    if len(diagonal) == 1:
        return 1.0
    reference = diagonal[0] if diagonal[0] > 0 else np.max(diagonal)
    variances = np.sort(diagonal) / reference
    position = np.linspace(0, 1, len(variances))
    return float(trapezoid(variances, position))


def get_major_axes(vcv: Union[VCV, np.ndarray]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Eigenvalues and eigenvectors of a vcv matrix sorted from highest to lowest eigenvalue

    Eigenvectors are the columns of the returned matrix. Small negative eigenvalues from
    numerical error are set to 0.
    """
    matrix = vcv.vcv if isinstance(vcv, VCV) else np.asarray(vcv, dtype=float)
    w, v = np.linalg.eigh(matrix)
    w_idx = np.argsort(-w)
    w = np.clip(w[w_idx], 0, None)
    v = v[:, w_idx]
    return w, v
