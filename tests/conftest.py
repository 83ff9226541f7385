import pytest

from gitsentry.report import Reporter


@pytest.fixture
def reporter():
    return Reporter(verbose=True)
