# themepark/park/ride_pool.py
from __future__ import annotations
import inspect
import logging
import threading
from typing import Dict, List, Optional

from themepark.core import IdGenerator, RideType
from themepark.facilities import ride_instances
from themepark.facilities.ride import Ride
from themepark.park.visitor_factory import register_employee

logger = logging.getLogger(__name__)

DEFAULT_RIDE_ID = "R001"


class RidePool:
    """
    Registry of rides keyed by ride id.

    Seeded on first access, either with every Ride subclass in ride_instances
    or with the `rides` entries of the park configuration when given.
    """

    def __init__(self, ride_configs: Optional[List[dict]] = None, metrics=None,
                 ids: Optional[IdGenerator] = None):
        self.metrics = metrics
        self.ids = ids or IdGenerator()
        self._ride_configs = ride_configs
        self._rides: Dict[str, Ride] = {}
        self._seeded = False
        self._lock = threading.Lock()

    # ---- seeding ----
    def _ensure_seeded(self):
        # caller holds self._lock
        if self._seeded:
            return
        self._seeded = True
        if self._ride_configs:
            for cfg in self._ride_configs:
                ride = self._build_from_config(cfg)
                self._rides[ride.ride_id] = ride
        else:
            for _, cls in inspect.getmembers(ride_instances, inspect.isclass):
                if issubclass(cls, Ride) and cls is not Ride:
                    ride = cls(metrics=self.metrics)
                    self._rides[ride.ride_id] = ride
        logger.info("Ride pool ready with %d rides: %s", len(self._rides),
                    ", ".join(sorted(self._rides)))

    def _build_from_config(self, cfg: dict) -> Ride:
        op_cfg = cfg.get("operator")
        operator = None
        if op_cfg:
            operator = register_employee(op_cfg["name"], int(op_cfg.get("age", 30)),
                                         op_cfg.get("position"), ids=self.ids)
        return Ride(
            ride_id=str(cfg["id"]),
            name=cfg["name"],
            operator=operator,
            max_rider=int(cfg.get("max_rider", 2)),
            ride_type=RideType[str(cfg.get("type", "THRILL")).upper()],
            metrics=self.metrics,
        )

    # ---- lookups ----
    def get_ride(self, ride_id: str, name: str, max_rider: int,
                 ride_type: RideType = RideType.THRILL) -> Ride:
        """Return the ride with this id, creating it (with a new operator) if absent."""
        with self._lock:
            self._ensure_seeded()
            ride = self._rides.get(ride_id)
            if ride is None:
                operator = register_employee(f"{name} operator", 30, f"{name} operator",
                                             ids=self.ids)
                ride = Ride(ride_id, name, operator, max_rider, ride_type, self.metrics)
                self._rides[ride_id] = ride
                logger.info("Ride pool added ride %s (%s)", ride_id, ride.name)
            return ride

    def get_default_ride(self, ride_id: str) -> Optional[Ride]:
        """Return the ride with this id, falling back to the default roller coaster."""
        with self._lock:
            self._ensure_seeded()
            ride = self._rides.get(ride_id)
            if ride is None:
                logger.warning("Unknown ride %s; falling back to %s", ride_id, DEFAULT_RIDE_ID)
                ride = self._rides.get(DEFAULT_RIDE_ID)
            return ride

    def lookup(self, ride_id: str) -> Optional[Ride]:
        with self._lock:
            self._ensure_seeded()
            return self._rides.get(ride_id)

    def rides(self) -> List[Ride]:
        with self._lock:
            self._ensure_seeded()
            return list(self._rides.values())

    def __contains__(self, ride_id) -> bool:
        return self.lookup(ride_id) is not None

    def __len__(self) -> int:
        return len(self.rides())
