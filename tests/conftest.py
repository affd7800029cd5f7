import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from rhomyosin.config import N_SPECIES, initial_state
from rhomyosin.simulation import integrate


@pytest.fixture
def x0():
    return initial_state()


@pytest.fixture
def random_states():
    rng = np.random.default_rng(20160912)
    return [rng.uniform(0.05, 5.0, size=N_SPECIES) for _ in range(5)]


@pytest.fixture(scope="session")
def full_run():
    """The documented run: initial condition integrated to t=300."""
    times, states = [], []

    def collect(t, x):
        times.append(t)
        states.append(x.copy())

    result = integrate(initial_state(), on_sample=collect)
    return result, np.array(times), np.array(states)
