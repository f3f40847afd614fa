from pathlib import Path

import pytest

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"

EXAMPLE1 = """{11111011};
I = {q0}; F = {q2};
(q0, 1, 0, R, q1);
(q1, 1, 1, R, q1);
(q1, 0, 0, R, q2);
(q2, 1, 0, H, q2);
(q2, 0, 0, H, q2);
"""

# Rendering of EXAMPLE1 right after it is built
EXAMPLE1_RENDERED = "0 0 0 1 1 1 1 1 0 1 1 \n      ^               "

PING_PONG = """{1};
I = {q0};
F = {q2};
(q0, 1, 1, R, q1);
(q1, 0, 0, L, q0);
"""


@pytest.fixture
def examples_dir():
    return EXAMPLES


@pytest.fixture
def example1():
    return EXAMPLE1


@pytest.fixture
def ping_pong():
    return PING_PONG
