from numbers import Real
import numpy as np

from .errors import InvalidCovariance


def check_covariance(covariance, dimensions: int) -> float:
    """
    Check that covariance is a valid correlation strength and return it as a float

    Any value in [-1, 1] is allowed for a single dimension (there are no off-diagonal
    entries) but |covariance| must be strictly less than 1 otherwise.
    """
    if isinstance(covariance, bool) or not isinstance(covariance, Real) or np.isnan(covariance):
        raise InvalidCovariance(covariance, "a real number")
    if dimensions > 1 and not (-1 < covariance < 1):
        raise InvalidCovariance(covariance, "a number in (-1, 1) for more than one dimension")
    if not (-1 <= covariance <= 1):
        raise InvalidCovariance(covariance, "a number in [-1, 1]")
    return float(covariance)


def check_psd(matrix: np.ndarray, atol: float = 1e-10) -> bool:
    """
    Check whether a symmetric matrix is positive semidefinite

    The smallest eigenvalue is compared against -atol scaled by the largest diagonal
    entry, so that numerical zeros of a degenerate ellipsoid still count as valid.
    """
    matrix = np.asarray(matrix, dtype=float)
    if not np.allclose(matrix, matrix.T):
        return False
    scale = max(1.0, float(np.max(np.abs(np.diag(matrix)))))
    return bool(np.min(np.linalg.eigvalsh(matrix)) >= -atol * scale)


def assemble_vcv(spectrum: np.ndarray, covariance: float = 0.0, atol: float = 1e-10) -> np.ndarray:
    """
    Build an (unscaled) variance-covariance matrix from an axis spectrum.

    The variance of each axis is the square of its length and the covariance between two
    axes is the correlation strength times the geometric mean of their variances:

    vcv[i, i] = spectrum[i] ** 2
    vcv[i, j] = covariance * sqrt(vcv[i, i] * vcv[j, j])

    Parameters
    ----------
    spectrum : np.ndarray
        Relative axis lengths, shape (dimensions,). Must be non-negative.
    covariance : float
        Correlation strength, in (-1, 1) when there is more than one dimension.
        (default is 0)
    atol : float
        Tolerance for the positive-semidefinite check. (default is 1e-10)

    Returns
    -------
    np.ndarray
        The symmetric (dimensions, dimensions) vcv matrix.

    Raises
    ------
    ValueError
        If spectrum is not a finite, non-negative 1D array.
    InvalidCovariance
        If covariance is out of range or the assembled matrix is not positive semidefinite
        (uniform negative covariance can't go below -1 / (dimensions - 1)).
    """
    spectrum = np.asarray(spectrum, dtype=float)
    if spectrum.ndim != 1:
        raise ValueError(f"spectrum must be a 1D array, got shape {spectrum.shape}")
    if not np.all(np.isfinite(spectrum)) or np.any(spectrum < 0):
        raise ValueError(f"spectrum must be finite and non-negative, got {spectrum}")

    dimensions = len(spectrum)
    covariance = check_covariance(covariance, dimensions)

    # spectrum is non-negative so sqrt(s_i**2 * s_j**2) == s_i * s_j
    vcv = covariance * np.outer(spectrum, spectrum)
    np.fill_diagonal(vcv, spectrum**2)

    if not check_psd(vcv, atol=atol):
        min_eigenvalue = np.min(np.linalg.eigvalsh(vcv))
        raise InvalidCovariance(
            covariance,
            f"a value keeping the matrix positive semidefinite (smallest eigenvalue is {min_eigenvalue:.3g})",
        )

    return vcv


def axis_angle(covariance: float) -> float:
    """
    Angle (in degrees) between two axis vectors for a given covariance strength

    No covariance is 90 degrees, covariance=1 is 0 degrees and covariance=-1 is 180 degrees.
    """
    covariance = check_covariance(covariance, 1)
    return 90.0 * (1 - covariance)
