import uuid
from datetime import datetime, timedelta
from enum import Enum, IntEnum
from typing import Optional


# ---------- Clock (source of "now") ----------
class Clock:
    """
    Clock for the park.
    - start=None: follows the wall clock
    - start=<datetime>: frozen at that moment, moved only by advance_minutes()
    """

    def __init__(self, start: Optional[datetime] = None):
        self._now = start

    def now(self) -> datetime:
        """Return the current moment."""
        if self._now is None:
            return datetime.now()
        return self._now

    def advance_minutes(self, minutes: int):
        """Move a frozen clock forward by a number of minutes."""
        if self._now is None:
            raise RuntimeError("cannot advance a wall clock")
        self._now += timedelta(minutes=minutes)


# ---------- Membership tiers ----------
class MembershipType(IntEnum):
    # values give the ordering STANDARD < GOLD < PLATINUM
    STANDARD = 1
    GOLD = 2
    PLATINUM = 3

    @property
    def label(self) -> str:
        return _MEMBERSHIP_LABELS[self]

    def __str__(self) -> str:
        return self.label


_MEMBERSHIP_LABELS = {
    MembershipType.STANDARD: "Standard member",
    MembershipType.GOLD: "Gold member",
    MembershipType.PLATINUM: "Platinum member",
}


# ---------- Ride categories ----------
class RideType(Enum):
    THRILL = "Thrill"
    FAMILY = "Family"
    KIDDIE = "Kiddie"

    def check_age(self, visitor) -> bool:
        return check_age(self, visitor)

    def __str__(self) -> str:
        return self.value


# Eligibility rule per ride category, evaluated on the visitor's age
AGE_RULES = {
    RideType.THRILL: lambda age: age >= 16,
    RideType.FAMILY: lambda age: True,
    RideType.KIDDIE: lambda age: 3 <= age <= 12,
}

AGE_RULE_TEXT = {
    RideType.THRILL: "16 years and older",
    RideType.FAMILY: "no age limit",
    RideType.KIDDIE: "3 to 12 years old",
}


def check_age(ride_type: RideType, visitor) -> bool:
    """Return True if the visitor's age satisfies the ride category rule."""
    return AGE_RULES[ride_type](visitor.age)


# ---------- Identifiers ----------
class IdGenerator:
    """
    Issues prefixed identifiers: PREFIX-<timestamp>-<random suffix>.
    Example:
        IdGenerator(clock).next("BOOK") -> 'BOOK-20261019-143000-5f1c2a9e'
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or Clock()

    def next(self, prefix: str) -> str:
        stamp = self.clock.now().strftime("%Y%m%d-%H%M%S")
        return f"{prefix}-{stamp}-{uuid.uuid4().hex[:8]}"
