from .errors import VCVError, InvalidDimension, InvalidShape, InvalidCovariance, InvalidMinThickness, InvalidSize, InvalidPosition
from .shape import generate_shape, lambda_from_roundness, roundness_from_lambda
from .covariance import assemble_vcv, check_psd, axis_angle
from .params import VCVParams, resolve_params
from .vcv import VCV, make_vcv, make_vcv_from_params, roundness_recovered, get_major_axes
from .batch import make_vcv_batch, make_vcv_table

__all__ = [
    "VCVError",
    "InvalidDimension",
    "InvalidShape",
    "InvalidCovariance",
    "InvalidMinThickness",
    "InvalidSize",
    "InvalidPosition",
    "generate_shape",
    "lambda_from_roundness",
    "roundness_from_lambda",
    "assemble_vcv",
    "check_psd",
    "axis_angle",
    "VCVParams",
    "resolve_params",
    "VCV",
    "make_vcv",
    "make_vcv_from_params",
    "roundness_recovered",
    "get_major_axes",
    "make_vcv_batch",
    "make_vcv_table",
]
