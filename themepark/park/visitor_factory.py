# themepark/park/visitor_factory.py
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Optional

from themepark.core import IdGenerator, MembershipType
from themepark.visitors.base import Employee, Visitor

logger = logging.getLogger(__name__)


class VisitorCreator(ABC):
    """Abstract Creator: each concrete creator issues one membership tier."""

    def __init__(self, ids: Optional[IdGenerator] = None):
        self.ids = ids or IdGenerator()

    @abstractmethod
    def membership(self) -> MembershipType:
        ...

    def register_visitor(self, name: str, age: int, has_insurance: bool = False) -> Visitor:
        """Mint person and visitor ids and build the visitor."""
        visitor = Visitor(
            person_id=self.ids.next("PERSON"),
            name=name,
            age=age,
            visitor_id=self.ids.next("VIS"),
            membership_type=self.membership(),
            has_insurance=has_insurance,
        )
        logger.info("Registered visitor %s (%s, %s)", visitor.visitor_id,
                    visitor.name, visitor.membership_type.name)
        return visitor


class StandardCreator(VisitorCreator):
    def membership(self) -> MembershipType:
        return MembershipType.STANDARD


class GoldCreator(VisitorCreator):
    def membership(self) -> MembershipType:
        return MembershipType.GOLD


class PlatinumCreator(VisitorCreator):
    def membership(self) -> MembershipType:
        return MembershipType.PLATINUM


CREATORS = {
    MembershipType.STANDARD: StandardCreator,
    MembershipType.GOLD: GoldCreator,
    MembershipType.PLATINUM: PlatinumCreator,
}


def register_visitor(name: str, age: int, membership: MembershipType = MembershipType.STANDARD,
                     has_insurance: bool = False, ids: Optional[IdGenerator] = None) -> Visitor:
    return CREATORS[membership](ids).register_visitor(name, age, has_insurance)


def register_employee(name: str, age: int, position: Optional[str] = None,
                      ids: Optional[IdGenerator] = None) -> Employee:
    ids = ids or IdGenerator()
    return Employee(ids.next("PERSON"), name, age, ids.next("EMP"), position)
