"""pytest configuration for object-reflector tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class Node:
    """Plain attribute record used as parent and child in tests."""

    def __init__(self, **values):
        self.__dict__.update(values)

    def __repr__(self) -> str:
        return f"Node({self.__dict__!r})"


class Point:
    """Slotted record."""

    __slots__ = ("x", "y")

    def __init__(self, x=0, y=0):
        self.x = x
        self.y = y


@pytest.fixture
def make_node():
    return Node


@pytest.fixture
def make_point():
    return Point
