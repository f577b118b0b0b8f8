from themepark.core import RideType
from themepark.facilities.ride import Ride
from themepark.visitors.base import Employee


class RollerCoaster(Ride):
    """Fast, thrilling ride for teenagers and adults."""
    def __init__(self, metrics=None):
        operator = Employee("EMP001", "Zhang San", 30, "EMP-2025", "Roller coaster operator")
        super().__init__("R001", "Super Roller Coaster", operator, 4, RideType.THRILL, metrics)


class PirateShip(Ride):
    """Pendulum swing ride, open to everyone."""
    def __init__(self, metrics=None):
        operator = Employee("EMP002", "Li Si", 35, "EMP-2025-02", "Pirate ship operator")
        super().__init__("R002", "Pirate Ship", operator, 5, RideType.FAMILY, metrics)


class Carousel(Ride):
    """Gentle merry-go-round for young children."""
    def __init__(self, metrics=None):
        operator = Employee("EMP003", "Wang Fang", 40, "EMP-2025-03", "Carousel operator")
        super().__init__("R003", "Carousel", operator, 3, RideType.KIDDIE, metrics)
