import os
import sys

import pytest

# Ensure tests can import top-level modules when pytest changes CWD.
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)


POINT_PROGRAM = """
struct Point {
    int x;
    int y;
};

void main() {
    struct Point p;
    p.x = 1;
    p.y = p.x + 2;
}
"""


@pytest.fixture
def point_program() -> str:
    """A small program using a struct, free of semantic errors."""
    return POINT_PROGRAM
