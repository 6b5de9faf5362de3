import pytest
from dataclasses import FrozenInstanceError
import numpy as np

from vcvlib import make_vcv, roundness_recovered, get_major_axes, generate_shape, lambda_from_roundness, VCV
from vcvlib import InvalidDimension, InvalidShape, InvalidCovariance, InvalidMinThickness, InvalidSize, InvalidPosition


def test_default_is_unit_circle():
    vcv = make_vcv()
    assert isinstance(vcv, VCV)
    assert np.array_equal(vcv.vcv, np.eye(2))
    assert np.array_equal(vcv.loc, np.zeros(2))
    assert vcv.dimensions == 2
    assert vcv.lam == 0


@pytest.mark.parametrize("dimensions", [1, 2, 3, 10, 100])
def test_sphere_any_dimension(dimensions):
    vcv = make_vcv(shape=1, dimensions=dimensions)
    assert np.array_equal(np.diag(vcv.vcv), np.ones(dimensions))
    assert np.array_equal(vcv.vcv, np.eye(dimensions))
    assert roundness_recovered(vcv) == pytest.approx(1.0)


def test_negative_covariance_ellipse():
    vcv = make_vcv(shape=0.5, covariance=-0.6, dimensions=2)
    spectrum = generate_shape(2, lambda_from_roundness(0.5))
    assert vcv.vcv[0, 1] < 0
    assert vcv.vcv[0, 1] == vcv.vcv[1, 0]
    assert np.allclose(np.diag(vcv.vcv), spectrum**2)
    assert vcv.vcv[0, 1] == pytest.approx(-0.6 * spectrum[0] * spectrum[1])
    assert np.allclose(vcv.spectrum, spectrum)


def test_line():
    vcv = make_vcv(shape=0, dimensions=3)
    assert vcv.lam == np.inf
    assert np.array_equal(vcv.vcv, np.diag([1.0, 0.0, 0.0]))

    vcv = make_vcv(shape=0, dimensions=3, min_thickness=0.1)
    assert np.allclose(np.diag(vcv.vcv), [1.0, 0.01, 0.01])


def test_size_scaling():
    vcv = make_vcv(size=3)
    assert np.allclose(vcv.vcv, 9 * np.eye(2))

    base = make_vcv(shape=0.4, covariance=0.3, dimensions=2)
    scaled = make_vcv(shape=0.4, covariance=0.3, dimensions=2, size=[1.0, 2.0])
    assert np.allclose(np.diag(scaled.vcv), np.diag(base.vcv) * [1.0, 4.0])
    assert scaled.vcv[0, 1] == pytest.approx(2 * base.vcv[0, 1])
    assert np.allclose(scaled.vcv, scaled.vcv.T)


def test_position():
    assert np.array_equal(make_vcv(position=2.5, dimensions=3).loc, np.full(3, 2.5))
    assert np.array_equal(make_vcv(position=[1, -1], dimensions=2).loc, np.array([1.0, -1.0]))
    assert np.array_equal(make_vcv(position=np.arange(4), dimensions=4).loc, np.arange(4.0))


@pytest.mark.parametrize(
    "kwargs, error",
    [
        (dict(dimensions=0), InvalidDimension),
        (dict(dimensions=1.5), InvalidDimension),
        (dict(shape=1.2), InvalidShape),
        (dict(shape=-0.2), InvalidShape),
        (dict(covariance=1.0), InvalidCovariance),
        (dict(covariance=-1.2), InvalidCovariance),
        (dict(covariance=-0.6, dimensions=4, shape=1), InvalidCovariance),
        (dict(min_thickness=1.0), InvalidMinThickness),
        (dict(size=0), InvalidSize),
        (dict(size=[1.0, 2.0, 3.0]), InvalidSize),
        (dict(position=[1.0, 2.0, 3.0]), InvalidPosition),
        (dict(position=np.nan), InvalidPosition),
    ],
)
def test_invalid_inputs(kwargs, error):
    with pytest.raises(error):
        make_vcv(**kwargs)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        make_vcv(shape=3)


def test_extrapolation():
    vcv = make_vcv(shape=1.5, dimensions=3, allow_extrapolation=True)
    assert vcv.lam < 0
    assert np.all(np.diff(np.diag(vcv.vcv)) > 0)


def test_vcv_is_immutable():
    vcv = make_vcv(shape=0.5)
    with pytest.raises(ValueError):
        vcv.vcv[0, 0] = 5.0
    with pytest.raises(ValueError):
        vcv.loc[0] = 5.0
    with pytest.raises(FrozenInstanceError):
        vcv.loc = np.ones(2)


def test_vcv_from_arrays():
    vcv = VCV(vcv=np.diag([4.0, 1.0]), loc=[0.0, 1.0])
    assert np.array_equal(vcv.spectrum, [2.0, 1.0])
    assert vcv == VCV(vcv=np.diag([4.0, 1.0]), loc=np.array([0.0, 1.0]))
    with pytest.raises(ValueError):
        VCV(vcv=np.ones((2, 3)), loc=[0.0, 0.0])
    with pytest.raises(ValueError):
        VCV(vcv=np.eye(2), loc=[0.0, 0.0, 0.0])


def test_roundness_recovered_two_dimensions():
    vcv = make_vcv(shape=1 / 3, dimensions=2)
    second = np.exp(-2 * vcv.lam)
    assert roundness_recovered(vcv) == pytest.approx((1 + second) / 2)
    assert roundness_recovered(vcv.vcv) == roundness_recovered(vcv)


def test_roundness_recovered_converges():
    target = 1 / 3
    error_low = abs(roundness_recovered(make_vcv(shape=target, dimensions=2)) - target)
    error_mid = abs(roundness_recovered(make_vcv(shape=target, dimensions=10)) - target)
    error_high = abs(roundness_recovered(make_vcv(shape=target, dimensions=100)) - target)
    assert error_high < error_mid < error_low
    assert error_high < 0.01


def test_roundness_recovered_edge_cases():
    assert roundness_recovered(make_vcv(dimensions=1)) == 1.0
    assert roundness_recovered(make_vcv(shape=0, dimensions=2)) == pytest.approx(0.5)
    small = make_vcv(shape=0.3, dimensions=10)
    large = make_vcv(shape=0.3, dimensions=10, size=5)
    assert roundness_recovered(large) == pytest.approx(roundness_recovered(small))


def test_major_axes():
    vcv = make_vcv(shape=0.4, covariance=0.5, dimensions=3)
    w, v = get_major_axes(vcv)
    assert np.all(np.diff(w) <= 0)
    assert np.all(w >= 0)
    assert np.allclose(v @ np.diag(w) @ v.T, vcv.vcv)

    w, v = get_major_axes(np.diag([1.0, 3.0]))
    assert np.allclose(w, [3.0, 1.0])
    assert np.allclose(np.abs(v[:, 0]), [0.0, 1.0])


def test_verbose(capsys):
    make_vcv(shape=0.5, dimensions=3, verbose=True)
    captured = capsys.readouterr()
    assert "lambda" in captured.out
    assert "axis spectrum" in captured.out


@pytest.mark.parametrize("shape", [1.2, 1.5, 2.0])
def test_roundness_recovered_extrapolated(shape):
    # later axes outgrow the reference axis, the statistic still converges to the request
    low = make_vcv(shape=shape, dimensions=3, allow_extrapolation=True)
    high = make_vcv(shape=shape, dimensions=1000, allow_extrapolation=True)
    assert roundness_recovered(high) == pytest.approx(shape, abs=1e-3)
    assert abs(roundness_recovered(high) - shape) < abs(roundness_recovered(low) - shape)
    scaled = make_vcv(shape=shape, dimensions=1000, size=3.0, allow_extrapolation=True)
    assert roundness_recovered(scaled) == pytest.approx(roundness_recovered(high))


def test_vcv_params_are_frozen():
    vcv = make_vcv(shape=0.5)
    with pytest.raises(FrozenInstanceError):
        vcv.params.shape = 5.0
    assert vcv.params.shape == 0.5


def test_vcv_is_hashable():
    first = make_vcv(shape=0.5, covariance=0.2, dimensions=3)
    second = make_vcv(shape=0.5, covariance=0.2, dimensions=3)
    third = make_vcv(shape=0.4, dimensions=3)
    assert hash(first) == hash(second)
    assert len({first, second, third}) == 2
