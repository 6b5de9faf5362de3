# With help from: https://github.com/pypa/sampleproject

# Always prefer setuptools over distutils
from setuptools import setup, find_packages
import pathlib

here = pathlib.Path(__file__).parent.resolve()

# Get the long description from the README file
long_description = (here / "README.md").read_text(encoding="utf-8")

# Core code for generating vcv matrices and batches of them
deps_core = [
    "numpy",
    "scipy",
    "matplotlib",
    "tqdm",
    "pandas",
    "joblib",
]

# Extra packages for running the test suite
deps_test = [
    "pytest",
]

setup(
    name="vcvlib",
    version="1.0.0",
    description="generate parameterized variance-covariance matrices of n-dimensional ellipsoids",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["vcvlib", "vcvlib.*"]),
    python_requires=">=3.9, <4",
    install_requires=deps_core,
    extras_require={
        "test": deps_test,
        "all": deps_test,
    },
)
