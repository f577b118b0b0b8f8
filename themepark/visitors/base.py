# themepark/visitors/base.py
from __future__ import annotations
import logging
from functools import cmp_to_key
from typing import Iterable, List, Optional

from themepark.core import MembershipType

logger = logging.getLogger(__name__)


class PersonInfo:
    """Identity, name and age shared by visitors and employees."""

    def __init__(self, person_id: str, name: str, age: int):
        self._id = person_id
        self._name = name
        self._age = max(0, age)  # negative ages are clamped, not rejected

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str):
        if value is None or not value.strip():
            logger.warning("Name cannot be blank; keeping %r", self._name)
            return
        self._name = value

    @property
    def age(self) -> int:
        return self._age

    @age.setter
    def age(self, value: int):
        if value < 0:
            logger.warning("Age cannot be negative; keeping %d", self._age)
            return
        self._age = value

    def __repr__(self):
        return f"PersonInfo(id={self._id!r}, name={self._name!r}, age={self._age})"


class _HasPerson:
    # id/name/age are read and written through the embedded PersonInfo
    person: PersonInfo

    @property
    def id(self) -> str:
        return self.person.id

    @property
    def name(self) -> str:
        return self.person.name

    @name.setter
    def name(self, value: str):
        self.person.name = value

    @property
    def age(self) -> int:
        return self.person.age

    @age.setter
    def age(self, value: int):
        self.person.age = value


class Visitor(_HasPerson):
    def __init__(self, person_id: str, name: str, age: int, visitor_id: str,
                 membership_type: Optional[MembershipType] = None,
                 has_insurance: bool = False):
        self.person = PersonInfo(person_id, name, age)
        self._visitor_id = visitor_id
        self._membership_type = membership_type or MembershipType.STANDARD
        self.has_insurance = bool(has_insurance)

    @property
    def visitor_id(self) -> str:
        return self._visitor_id

    @property
    def membership_type(self) -> MembershipType:
        return self._membership_type

    @membership_type.setter
    def membership_type(self, value: MembershipType):
        if value is None:
            logger.warning("Membership type cannot be empty; keeping %s",
                           self._membership_type.name)
            return
        self._membership_type = value

    def __repr__(self):
        return (f"Visitor(visitor_id={self._visitor_id!r}, "
                f"membership={self._membership_type.name}, "
                f"has_insurance={self.has_insurance}, {self.person!r})")


class Employee(_HasPerson):
    def __init__(self, person_id: str, name: str, age: int, employee_id: str,
                 position: Optional[str] = None):
        self.person = PersonInfo(person_id, name, age)
        self._employee_id = employee_id
        self._position = position if position and position.strip() else "Unknown position"

    @property
    def employee_id(self) -> str:
        return self._employee_id

    @property
    def position(self) -> str:
        return self._position

    @position.setter
    def position(self, value: str):
        if value is None or not value.strip():
            logger.warning("Position cannot be blank; keeping %r", self._position)
            return
        self._position = value

    def __repr__(self):
        return (f"Employee(employee_id={self._employee_id!r}, "
                f"position={self._position!r}, {self.person!r})")


# ---------- Ordering ----------

def compare_visitors(a: Optional[Visitor], b: Optional[Visitor]) -> int:
    """
    Membership tier descending (PLATINUM, GOLD, STANDARD), then age ascending.
    None sorts after every visitor.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    if a.membership_type != b.membership_type:
        return -1 if a.membership_type > b.membership_type else 1
    return (a.age > b.age) - (a.age < b.age)


visitor_sort_key = cmp_to_key(compare_visitors)


def sort_visitors(visitors: Iterable[Optional[Visitor]]) -> List[Optional[Visitor]]:
    return sorted(visitors, key=visitor_sort_key)
