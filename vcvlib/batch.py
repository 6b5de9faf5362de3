from typing import Union, List, Sequence
import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from tqdm import tqdm

from .params import VCVParams, resolve_params, params_from_sequence
from .vcv import VCV, make_vcv_from_params, roundness_recovered


def _row_to_params(row) -> VCVParams:
    """Convert one row of a parameter table (VCVParams, dict, or tuple) to VCVParams"""
    if isinstance(row, VCVParams):
        return row
    if isinstance(row, dict):
        return resolve_params(row)
    if isinstance(row, (tuple, list)):
        return params_from_sequence(row)
    raise TypeError(f"parameter rows must be VCVParams, dict, tuple or list, got {type(row).__name__}")


def _get_rows(parameters: Union[pd.DataFrame, Sequence]) -> List:
    if isinstance(parameters, pd.DataFrame):
        # itertuples keeps the dtype of each column (iterrows would upcast dimensions to float)
        columns = list(parameters.columns)
        rows = [dict(zip(columns, values)) for values in parameters.itertuples(index=False, name=None)]
        # missing entries of a table come through as NaN, use the defaults instead
        rows = [{k: v for k, v in row.items() if not (np.isscalar(v) and pd.isna(v))} for row in rows]
        # a NaN in an integer column upcasts the whole column to float
        for row in rows:
            dimensions = row.get("dimensions")
            if isinstance(dimensions, float) and dimensions.is_integer():
                row["dimensions"] = int(dimensions)
        return rows
    return list(parameters)


def make_vcv_batch(
    parameters: Union[pd.DataFrame, Sequence],
    n_jobs: int = 1,
    progress: bool = False,
) -> List[VCV]:
    """
    Make one VCV per parameter row, preserving the order of the rows.

    Every row is validated before any matrix is built, so an invalid row fails the whole
    batch without returning partial results.

    Parameters
    ----------
    parameters : pd.DataFrame or sequence
        One parameter set per row. Rows can be VCVParams, dicts of make_vcv keyword arguments,
        tuples of (shape, covariance, size, position, dimensions), or the rows of a DataFrame
        whose columns are make_vcv keyword arguments.
    n_jobs : int
        Number of joblib workers, 1 builds sequentially. (default is 1)
    progress : bool
        If True, will show a tqdm progress bar. (default is False)

    Returns
    -------
    list of VCV
        The ellipsoids, same length and order as parameters.
    """
    params = [_row_to_params(row) for row in _get_rows(parameters)]
    iterator = tqdm(params, desc="building vcvs", disable=not progress)

    if n_jobs == 1:
        return [make_vcv_from_params(p) for p in iterator]

    # joblib returns results in the order the tasks were submitted
    return Parallel(n_jobs=n_jobs)(delayed(make_vcv_from_params)(p) for p in iterator)


def make_vcv_table(
    parameters: Union[pd.DataFrame, Sequence],
    n_jobs: int = 1,
    progress: bool = False,
) -> pd.DataFrame:
    """
    Make a VCV per parameter row and summarize them in a table

    The table is indexed like parameters (the DataFrame index, or 0..N-1 for sequences) and
    holds the requested shape, covariance and dimensions, the decay rate, the recovered
    roundness, and the VCV itself.
    """
    vcvs = make_vcv_batch(parameters, n_jobs=n_jobs, progress=progress)
    index = parameters.index if isinstance(parameters, pd.DataFrame) else pd.RangeIndex(len(vcvs))
    data = dict(
        shape=[v.params.shape for v in vcvs],
        covariance=[v.params.covariance for v in vcvs],
        dimensions=[v.dimensions for v in vcvs],
        lam=[v.lam for v in vcvs],
        roundness_recovered=[roundness_recovered(v) for v in vcvs],
        vcv=vcvs,
    )
    return pd.DataFrame(data, index=index)
