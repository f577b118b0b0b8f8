"""
Shared test fixtures.
A frozen clock keeps booking times and generated ids deterministic enough
to reason about; every test gets its own park, so no state leaks between tests.
"""

from datetime import datetime

import pytest

from themepark.bookings.ledger import BookingLedger
from themepark.core import Clock, MembershipType, RideType
from themepark.facilities.ride import Ride
from themepark.park.park import Park
from themepark.park.ride_pool import RidePool
from themepark.visitors.base import Employee, Visitor

START = datetime(2026, 3, 1, 9, 0)


@pytest.fixture
def clock():
    return Clock(START)


@pytest.fixture
def make_visitor():
    def _make(n, age=20, membership=MembershipType.STANDARD, insurance=False, name=None):
        return Visitor(f"PERSON-{n}", name or f"Guest {n}", age, f"VIS-{n}", membership, insurance)
    return _make


@pytest.fixture
def operator():
    return Employee("PERSON-EMP-1", "Sam", 30, "EMP-1", "Operator")


@pytest.fixture
def thrill_ride(operator):
    return Ride("T1", "Test Coaster", operator, 4, RideType.THRILL)


@pytest.fixture
def park(clock):
    rides = RidePool()
    return Park(rides, BookingLedger(ride_pool=rides), clock)
