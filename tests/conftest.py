"""Shared fixtures: a small units-of-measure type universe."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from bindchain.core.types import ClassType


@pytest.fixture
def units() -> SimpleNamespace:
    """Number, Length, Time and Velocity with the reactions behind ``5 mi/hr``.

    ``Number`` and ``Length`` have no binder reaction in either direction;
    ``Length / Time`` is a velocity and ``Velocity`` post-binds a number.
    """

    number = ClassType("Number")
    length = ClassType("Length")
    time = ClassType("Time")
    velocity = ClassType("Velocity")

    length.define("divide", (time,), velocity)
    velocity.define("postfixBind", (number,), velocity)
    return SimpleNamespace(number=number, length=length, time=time, velocity=velocity)
