"""
Pytest configuration and shared fixtures for splitmerge tests.
"""

import numpy as np
import pytest

from splitmerge import (DirichletProcessMixtureModel, GaussianComponent,
                        MultivariateGaussianComponent,
                        SingleObservationSplitStrategy)


@pytest.fixture
def rng_seed():
    """Default RNG seed for reproducible tests."""
    return 42


@pytest.fixture
def scenario_a_model():
    """One component holding observations {0, 1, 2, 3}."""
    y = np.array([0.0, 0.1, 5.0, 5.1])
    component = GaussianComponent(2.5, 6.0, data=[0, 1, 2, 3])
    return DirichletProcessMixtureModel(y, [component])


@pytest.fixture
def scenario_b_model():
    """Components {1, 2}, {5} and {0, 3, 4}, in that order."""
    y = np.array([0.0, -3.0, -3.1, 10.0, 10.2, 3.0])
    components = [
        GaussianComponent(-3.0, 1.0, data=[1, 2]),
        GaussianComponent(3.0, 1.0, data=[5]),
        GaussianComponent(10.0, 1.0, data=[0, 3, 4]),
    ]
    return DirichletProcessMixtureModel(y, components)


@pytest.fixture
def two_cluster_data():
    """Two well separated clusters of 20 observations each."""
    random_state = np.random.RandomState(0)
    return np.hstack([random_state.normal(-5, 1, size=20),
                      random_state.normal(+5, 1, size=20)])


@pytest.fixture
def two_cluster_model(two_cluster_data):
    """All 40 observations in one broad component."""
    component = GaussianComponent(0.0, 25.0, data=range(40))
    return DirichletProcessMixtureModel(two_cluster_data, [component])


@pytest.fixture
def separated_model():
    """Two components with well separated means."""
    y = np.array([-5.0, -5.1, -4.9, 5.0, 5.1, 4.9])
    components = [
        GaussianComponent(-5.0, 1.0, data=[0, 1, 2]),
        GaussianComponent(+5.0, 1.0, data=[3, 4, 5]),
    ]
    return DirichletProcessMixtureModel(y, components)


@pytest.fixture
def bivariate_model():
    """Thirty two-dimensional observations in a single component."""
    random_state = np.random.RandomState(1)
    y = np.vstack([random_state.multivariate_normal([-4, 0], np.eye(2), 15),
                   random_state.multivariate_normal([+4, 0], np.eye(2), 15)])
    component = MultivariateGaussianComponent(
        np.zeros(2), 10 * np.eye(2), data=range(30))
    return DirichletProcessMixtureModel(y, [component])


def make_strategy(model, **kwargs):
    """Create a strategy with a short burn-in, so tests run quickly."""
    kwds = dict(burn_in=20)
    kwds.update(kwargs)
    return SingleObservationSplitStrategy(model, **kwds)


@pytest.fixture
def overlapping_model():
    """Two components whose densities overlap substantially."""
    y = np.array([0.0, 0.5, 0.2, 1.0, 0.8, 1.2])
    components = [
        GaussianComponent(0.0, 1.0, data=[0, 1, 2]),
        GaussianComponent(1.0, 1.0, data=[3, 4, 5]),
    ]
    return DirichletProcessMixtureModel(y, components)
