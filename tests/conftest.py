import pytest
from polyscheme import Gauss, PolynomialScheme, Rational, avail_backends
from polyscheme.names import *

# Initialize the list of Gauss-Jordan backends
backends = [PYTHON]

# Add FLINT to the list if the python-flint package is installed
if FLINT in avail_backends:
    backends.append(FLINT)


@pytest.fixture(params=backends, scope="session")
def curr_backend(request: pytest.FixtureRequest) -> str:
    """Provide session-level fixture for parametrized backend names."""
    return request.param


@pytest.fixture(params=PIVOTING_STRATEGIES, scope="session")
def pivoting(request: pytest.FixtureRequest) -> str:
    """Provide session-level fixture for pivoting strategies."""
    return request.param


@pytest.fixture(scope="session")
def gauss(curr_backend: str, pivoting: str) -> Gauss:
    """Provide a solver for every backend and pivoting strategy."""
    return Gauss.get_instance(pivoting, curr_backend)


@pytest.fixture
def fd2_scheme():
    """Order 2 central finite difference scheme on u_{-1}, u_0, u_1."""
    PS = PolynomialScheme(2)
    P = PS.get_polynomial()
    return PS.add_eqn(P(-1)).add_eqn(P(0)).add_eqn(P(1))


@pytest.fixture
def fv2_scheme():
    """Order 2 finite volume scheme on the averages of cells -1, 0, 1."""
    PS = PolynomialScheme(2)
    P = PS.get_polynomial()
    return (PS.add_eqn(P.integrate(Rational(-3, 2), Rational(-1, 2)))
            .add_eqn(P.integrate(Rational(-1, 2), Rational(1, 2)))
            .add_eqn(P.integrate(Rational(1, 2), Rational(3, 2))))
