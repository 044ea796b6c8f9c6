import math

import numpy as np
import pytest

from youbot_ik import AnalyticalSolver


@pytest.fixture
def solver():
    return AnalyticalSolver([-math.pi] * 5, [math.pi] * 5)


@pytest.fixture
def q_zero():
    return np.zeros(5)


@pytest.fixture
def q_generic():
    """A configuration well inside the workspace with every joint non-zero."""
    return np.array([0.2, 0.4, 0.6, 0.5, 0.3])
