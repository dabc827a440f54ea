import pytest

from algorithms import generate
from engine import Navigator


@pytest.fixture
def trace2():
    return generate(2)


@pytest.fixture
def trace3():
    return generate(3)


@pytest.fixture
def nav():
    return Navigator()


@pytest.fixture
def client():
    from main import app

    app.config.update(TESTING=True, SECRET_KEY="test-secret")
    with app.test_client() as c:
        yield c
