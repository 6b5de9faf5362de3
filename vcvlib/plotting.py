from typing import Optional, Sequence, Tuple, Union, List
from dataclasses import dataclass, field
from pathlib import Path
import numpy as np
import matplotlib.pyplot as plt

from .vcv import VCV, make_vcv, roundness_recovered, get_major_axes


def save_figure(fig: plt.Figure, path: Path, formats: Sequence[str] = ("png", "svg"), dpi: int = 300, parents: bool = True) -> List[Path]:
    """
    Save a figure once per requested format, returning the paths that were written

    path is used without its suffix (a "figures/roundness" path writes roundness.png and
    roundness.svg). dpi only applies to raster formats.
    """
    path = Path(path)
    if parents:
        path.parent.mkdir(parents=True, exist_ok=True)
    saved = []
    for fmt in formats:
        target = path.parent / f"{path.name}.{fmt.lstrip('.')}"
        fig.savefig(target, dpi=dpi)
        saved.append(target)
    return saved


def identity_line(ax: Optional[plt.Axes] = None, **kwargs):
    """Draw y = x across the current x limits of ax"""
    if ax is None:
        ax = plt.gca()
    limits = np.array(ax.get_xlim())
    return ax.plot(limits, limits, **kwargs)


@dataclass
class VCVPlotStyle:
    """Style of each element drawn by plot_vcv.

    Each element takes a dictionary of matplotlib keyword arguments, or None to hide it.

    Parameters
    ----------
    vcv_axes : dict | None, default={"color": "k"}
        The outline of the ellipse (passed to ax.plot).
    eigen_vectors : dict | None, default=None
        The major axes of the ellipse, scaled by the square root of the eigenvalues (ax.plot).
    eigen_values : dict | None, default=None
        Text labels with the eigenvalue of each major axis (ax.text).
    """

    vcv_axes: Optional[dict] = field(default_factory=lambda: dict(color="k"))
    eigen_vectors: Optional[dict] = None
    eigen_values: Optional[dict] = None

    def __post_init__(self):
        for name in ("vcv_axes", "eigen_vectors", "eigen_values"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, dict):
                raise ValueError(f"{name} must be a dict of matplotlib keyword arguments or None, got {type(value).__name__}")


def ellipse_points(vcv: VCV, dims: Tuple[int, int] = (0, 1), num_points: int = 100, nsigma: float = 1.0) -> np.ndarray:
    """
    Return the outline of the 2D projection of an ellipsoid

    Returns an array of shape (num_points, 2) tracing the nsigma contour of the vcv
    restricted to the dimensions in dims, centered on the vcv location.
    """
    dims = list(dims)
    assert len(dims) == 2, "dims must select exactly two dimensions"
    assert max(dims) < vcv.dimensions, f"dims {dims} out of range for a {vcv.dimensions}D vcv"
    w, v = get_major_axes(vcv.vcv[np.ix_(dims, dims)])
    theta = np.linspace(0, 2 * np.pi, num_points)
    circle = np.stack((np.cos(theta), np.sin(theta)))
    outline = v @ (nsigma * np.sqrt(w)[:, None] * circle)
    return outline.T + vcv.loc[dims]


def plot_vcv(
    vcv: VCV,
    dims: Tuple[int, int] = (0, 1),
    ax: Optional[plt.Axes] = None,
    style: Union[VCVPlotStyle, dict, None] = None,
    nsigma: float = 1.0,
) -> plt.Axes:
    """
    Draw the 2D projection of a vcv as an ellipse, optionally with its major axes.

    Parameters
    ----------
    vcv : VCV
        The ellipsoid to draw.
    dims : tuple of int
        The two dimensions to project onto. (default is (0, 1))
    ax : plt.Axes, optional
        Axes to draw on (default is the current axes).
    style : VCVPlotStyle | dict | None
        What to draw and how, see VCVPlotStyle. (default is just the outline)
    nsigma : float
        Which contour of the ellipse to draw. (default is 1)

    Returns
    -------
    plt.Axes
        The axes that were drawn on.
    """
    if ax is None:
        ax = plt.gca()
    if style is None:
        style = VCVPlotStyle()
    elif isinstance(style, dict):
        style = VCVPlotStyle(**style)

    dims = list(dims)
    center = vcv.loc[dims]

    if style.vcv_axes is not None:
        outline = ellipse_points(vcv, dims=dims, nsigma=nsigma)
        ax.plot(outline[:, 0], outline[:, 1], **style.vcv_axes)

    if style.eigen_vectors is not None or style.eigen_values is not None:
        w, v = get_major_axes(vcv.vcv[np.ix_(dims, dims)])
        for value, vector in zip(w, v.T):
            tip = center + nsigma * np.sqrt(value) * vector
            if style.eigen_vectors is not None:
                ax.plot([center[0], tip[0]], [center[1], tip[1]], **style.eigen_vectors)
            if style.eigen_values is not None:
                ax.text(tip[0], tip[1], f"{value:.2f}", **style.eigen_values)

    ax.set_aspect("equal")
    return ax


def plot_roundness_recovery(
    shapes: Optional[Sequence[float]] = None,
    dimensions: Sequence[int] = (2, 3, 5, 10, 100),
    ax: Optional[plt.Axes] = None,
    cmap: str = "viridis",
) -> plt.Axes:
    """
    Plot the requested shape against the roundness recovered from the generated vcv.

    One curve per number of dimensions; the identity line is what the curves converge to
    as the number of dimensions grows.
    """
    if shapes is None:
        shapes = np.linspace(0, 1, 21)
    if ax is None:
        ax = plt.gca()

    colors = plt.get_cmap(cmap)(np.linspace(0, 1, len(dimensions)))
    for color, ndim in zip(colors, dimensions):
        recovered = [roundness_recovered(make_vcv(shape=s, dimensions=ndim)) for s in shapes]
        ax.plot(shapes, recovered, color=color, label=f"{ndim}D")

    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    identity_line(ax=ax, color="k", linestyle="--", linewidth=0.5)
    ax.set_xlabel("Requested shape")
    ax.set_ylabel("Recovered roundness")
    ax.legend(loc="best")
    return ax
