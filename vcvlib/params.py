from typing import Union, Tuple, List, Optional, Sequence
from dataclasses import dataclass, asdict, fields
from numbers import Real
from pathlib import Path
import json
import numpy as np

from .errors import InvalidSize, InvalidPosition
from .shape import check_dimensions, check_min_thickness, check_shape
from .covariance import check_covariance


def _scalar_or_vector(value) -> Union[float, Tuple[float, ...], None]:
    """Return a float for scalars, a tuple of floats for vectors, or None if neither"""
    if isinstance(value, bool):
        return None
    if isinstance(value, Real):
        return float(value)
    try:
        array = np.asarray(value, dtype=float)
    except (TypeError, ValueError):
        return None
    if array.ndim == 0:
        return float(array)
    if array.ndim != 1:
        return None
    return tuple(float(v) for v in array)


def check_size(size, dimensions: int) -> Union[float, Tuple[float, ...]]:
    """Check that size is a positive scalar or a positive vector with one entry per dimension"""
    value = _scalar_or_vector(size)
    if value is None:
        raise InvalidSize(size, "a positive number or a vector of positive numbers")
    if isinstance(value, tuple) and len(value) != dimensions:
        raise InvalidSize(size, f"a vector of length {dimensions}")
    if not np.all(np.isfinite(value)) or not np.all(np.array(value) > 0):
        raise InvalidSize(size, "positive, finite values")
    return value


def check_position(position, dimensions: int) -> Union[float, Tuple[float, ...]]:
    """Check that position is a finite scalar or a finite vector with one entry per dimension"""
    value = _scalar_or_vector(position)
    if value is None:
        raise InvalidPosition(position, "a number or a vector of numbers")
    if isinstance(value, tuple) and len(value) != dimensions:
        raise InvalidPosition(position, f"a vector of length {dimensions}")
    if not np.all(np.isfinite(value)):
        raise InvalidPosition(position, "finite values")
    return value


@dataclass(frozen=True)
class VCVParams:
    """Parameters for generating a vcv matrix.

    Contains the intuitive controls of the ellipsoid generator. Everything is validated on
    construction and the instance is frozen afterwards, so an invalid parameter set can
    never reach the generators.

    Parameters
    ----------
    shape : float, default=1.0
        Roundness of the ellipsoid, 1 is a hypersphere and 0 is a line.
    covariance : float, default=0.0
        Correlation strength between axes, in (-1, 1) for more than one dimension.
    dimensions : int, default=2
        Number of dimensions of the ellipsoid.
    size : float | tuple of float, default=1.0
        Scaling of the axes (uniform or per dimension).
    position : float | tuple of float, default=0.0
        Location of the centroid (broadcast or per dimension).
    min_thickness : float, default=0.0
        Floor applied to every relative axis length, in [0, 1).
    allow_extrapolation : bool, default=False
        Whether shape may exceed 1.
    """

    shape: float = 1.0
    covariance: float = 0.0
    dimensions: int = 2
    size: Union[float, Tuple[float, ...]] = 1.0
    position: Union[float, Tuple[float, ...]] = 0.0
    min_thickness: float = 0.0
    allow_extrapolation: bool = False

    def __repr__(self) -> str:
        class_fields = fields(self)
        lines = []
        for field in class_fields:
            field_name = field.name
            field_value = getattr(self, field_name)
            lines.append(f"{field_name}={repr(field_value)}")

        class_name = self.__class__.__name__
        joined_lines = ",\n    ".join(lines)
        return f"{class_name}(\n    {joined_lines}\n)"

    @classmethod
    def from_dict(cls, params_dict: dict) -> "VCVParams":
        """Create a VCVParams instance from a dictionary.

        Parameters
        ----------
        params_dict : dict
            Dictionary of parameter names and values. Missing parameters will
            use default values from VCVParams.

        Returns
        -------
        VCVParams
            New VCVParams instance with values from the dictionary.
        """
        return cls(**{k: params_dict[k] for k in params_dict})

    @classmethod
    def from_path(cls, path: Path) -> "VCVParams":
        """Create a VCVParams instance from a JSON file."""
        with open(path, "r") as f:
            return cls.from_dict(json.load(f))

    def compare(self, other: "VCVParams", filter_keys: Optional[List[str]] = None) -> bool:
        """Compare two VCVParams instances (optionally only on filter_keys)"""
        if filter_keys is None:
            return self == other
        else:
            return all(getattr(self, key) == getattr(other, key) for key in filter_keys)

    def save(self, path: Path) -> None:
        """Save the parameters to a JSON file."""
        with open(path, "w") as f:
            json.dump(asdict(self), f, sort_keys=True)

    def __post_init__(self):
        # frozen, so the validated values are bound with object.__setattr__
        allow_extrapolation = bool(self.allow_extrapolation)
        dimensions = check_dimensions(self.dimensions)
        validated = dict(
            allow_extrapolation=allow_extrapolation,
            dimensions=dimensions,
            shape=check_shape(self.shape, allow_extrapolation=allow_extrapolation),
            covariance=check_covariance(self.covariance, dimensions),
            min_thickness=check_min_thickness(self.min_thickness),
            size=check_size(self.size, dimensions),
            position=check_position(self.position, dimensions),
        )
        for name, value in validated.items():
            object.__setattr__(self, name, value)


def resolve_params(params: Union[VCVParams, dict, None] = None, **kwargs) -> VCVParams:
    """
    Resolve an input to a VCVParams instance.

    Parameters
    ----------
    params : VCVParams | dict | None
        An existing parameter set, a dictionary of parameters, or None for the defaults.
    **kwargs
        Updates applied on top of params.

    Returns
    -------
    VCVParams
        The resolved (and validated) parameters.
    """
    if params is None:
        base = {}
    elif isinstance(params, dict):
        base = dict(params)
    elif isinstance(params, VCVParams):
        base = asdict(params)
    else:
        raise ValueError(f"params must be a dict, None, or an instance of VCVParams, got {type(params).__name__}")
    base.update(kwargs)
    return VCVParams.from_dict(base)


def params_from_sequence(row: Sequence) -> VCVParams:
    """Convert a (shape, covariance, size, position, dimensions) tuple to VCVParams"""
    keys = ("shape", "covariance", "size", "position", "dimensions")
    if len(row) > len(keys):
        raise ValueError(f"parameter tuples have at most {len(keys)} entries {keys}, got {len(row)}")
    return VCVParams.from_dict(dict(zip(keys, row)))
