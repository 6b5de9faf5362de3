# add path that contains the vcvlib package
import sys
import os

mainPath = os.path.dirname(os.path.abspath(__file__)) + "/.."
sys.path.append(mainPath)

from argparse import ArgumentParser
from pathlib import Path
import numpy as np
import pandas as pd
from matplotlib import pyplot as plt

from vcvlib import make_vcv_table
from vcvlib.plotting import plot_roundness_recovery, save_figure

DIMENSIONS = [2, 3, 5, 10, 100]


def positive_int(value):
    """Check if a value is an integer that is greater than 0"""
    try:
        value = int(value)
    except ValueError:
        raise TypeError("value is not an integer")
    if value <= 0:
        raise ValueError("value is not greater than 0")
    return value


def handle_inputs():
    parser = ArgumentParser(description="compare requested shape against the roundness recovered from generated vcvs")
    parser.add_argument("--dimensions", nargs="*", type=positive_int, default=DIMENSIONS, help=f"dimensions to test (default={DIMENSIONS})")
    parser.add_argument("--num-shapes", type=positive_int, default=11, help="number of evenly spaced shapes in [0, 1] (default=11)")
    parser.add_argument("--n-jobs", type=int, default=1, help="number of joblib workers (default=1)")
    parser.add_argument("--save-path", type=str, default=None, help="where to save the diagnostic figure (default=None, no figure)")
    return parser.parse_args()


if __name__ == "__main__":
    args = handle_inputs()

    shapes = np.linspace(0, 1, args.num_shapes)
    parameters = pd.DataFrame([dict(shape=s, dimensions=d) for d in args.dimensions for s in shapes])
    table = make_vcv_table(parameters, n_jobs=args.n_jobs, progress=True)
    table["error"] = table["roundness_recovered"] - table["shape"]

    summary = table.pivot(index="shape", columns="dimensions", values="roundness_recovered")
    print(summary.round(3))
    print("mean absolute error per dimension:")
    print(table.groupby("dimensions")["error"].apply(lambda e: np.mean(np.abs(e))).round(4))

    if args.save_path is not None:
        fig, ax = plt.subplots(1, 1, figsize=(4, 4), layout="constrained")
        plot_roundness_recovery(shapes, dimensions=args.dimensions, ax=ax)
        saved = save_figure(fig, Path(args.save_path))
        plt.close(fig)
        print("saved figure to " + ", ".join(str(s) for s in saved))
