from themepark.core import MembershipType
from themepark.park.visitor_factory import (GoldCreator, PlatinumCreator, register_employee,
                                            register_visitor)
from themepark.visitors.base import Employee, Visitor, compare_visitors, sort_visitors

P, G, S = MembershipType.PLATINUM, MembershipType.GOLD, MembershipType.STANDARD


class TestPersonFields:
    def test_blank_name_is_rejected(self, make_visitor, caplog):
        v = make_visitor(1, name="Ann")
        v.name = "   "
        assert v.name == "Ann"
        assert "Name cannot be blank" in caplog.text
        v.name = "Anne"
        assert v.person.name == "Anne"

    def test_negative_age_is_rejected(self, make_visitor, caplog):
        v = make_visitor(1, age=20)
        v.age = -3
        assert v.age == 20
        assert "Age cannot be negative" in caplog.text
        v.age = 0
        assert v.age == 0

    def test_constructor_clamps_negative_age(self):
        assert Visitor("P", "Neg", -5, "V").age == 0

    def test_ids_come_from_the_embedded_person(self, make_visitor):
        v = make_visitor(7)
        assert v.id == "PERSON-7"
        assert v.visitor_id == "VIS-7"


class TestVisitor:
    def test_membership_defaults_to_standard(self):
        assert Visitor("P", "X", 20, "V", None).membership_type is S

    def test_membership_setter_rejects_none(self, make_visitor, caplog):
        v = make_visitor(1, membership=G)
        v.membership_type = None
        assert v.membership_type is G
        assert "Membership type cannot be empty" in caplog.text
        v.membership_type = P
        assert v.membership_type is P

    def test_insurance_flag(self, make_visitor):
        v = make_visitor(1)
        v.has_insurance = True
        assert v.has_insurance is True


class TestEmployee:
    def test_blank_position_defaults(self):
        assert Employee("P", "E", 30, "EMP", "").position == "Unknown position"

    def test_position_setter(self, operator, caplog):
        operator.position = ""
        assert operator.position == "Operator"
        assert "Position cannot be blank" in caplog.text
        operator.position = "Supervisor"
        assert operator.position == "Supervisor"


class TestOrdering:
    def test_tier_descending_then_age_ascending(self, make_visitor):
        people = [make_visitor(1, 25, G), make_visitor(2, 20, P), make_visitor(3, 30, S),
                  make_visitor(4, 22, G), make_visitor(5, 19, P)]
        ordered = sort_visitors(people)
        assert [(v.membership_type, v.age) for v in ordered] == [
            (P, 19), (P, 20), (G, 22), (G, 25), (S, 30)]

    def test_none_sorts_last(self, make_visitor):
        a, b = make_visitor(1, 40, S), make_visitor(2, 10, P)
        assert sort_visitors([None, a, None, b]) == [b, a, None, None]
        assert compare_visitors(None, None) == 0
        assert compare_visitors(None, a) == 1
        assert compare_visitors(a, None) == -1

    def test_equal_keys_keep_their_order(self, make_visitor):
        a, b = make_visitor(1, 20, G), make_visitor(2, 20, G)
        assert compare_visitors(a, b) == 0
        assert sort_visitors([b, a]) == [b, a]


class TestRegistration:
    def test_creators_issue_their_tier(self):
        assert GoldCreator().register_visitor("G", 30).membership_type is G
        assert PlatinumCreator().register_visitor("P", 30, True).has_insurance is True

    def test_register_visitor_mints_ids(self):
        a = register_visitor("Ann", 20)
        b = register_visitor("Ann", 20)
        assert a.visitor_id.startswith("VIS-")
        assert a.id.startswith("PERSON-")
        assert a.visitor_id != b.visitor_id
        assert a.membership_type is S

    def test_register_employee(self):
        e = register_employee("Op", 45, "Ride operator")
        assert e.employee_id.startswith("EMP-")
        assert e.position == "Ride operator"
