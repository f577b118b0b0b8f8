# themepark/facilities/ride.py
import csv
import logging
import os
import threading
from typing import List, Optional, Tuple

from themepark.core import AGE_RULE_TEXT, MembershipType, RideType
from themepark.facilities.queues import RideQueue
from themepark.visitors.base import Employee, Visitor, visitor_sort_key

logger = logging.getLogger(__name__)

HISTORY_HEADER = ["visitorId", "personId", "name", "age", "membershipType", "hasInsurance"]


class Ride:
    def __init__(self, ride_id: str, name: str, operator: Optional[Employee] = None,
                 max_rider: int = 2, ride_type: RideType = RideType.THRILL, metrics=None):
        self._ride_id = ride_id
        self._name = name if name and name.strip() else "Unknown ride"
        self._operator = operator
        self._max_rider = max(1, max_rider)
        self._num_of_cycles = 0
        self.ride_type = ride_type
        self.metrics = metrics

        self.queue = RideQueue()
        self._history: List[Visitor] = []

        # guards history, counters and whole-cycle moves
        self._lock = threading.RLock()

    # ---- Attributes ----
    @property
    def ride_id(self) -> str:
        return self._ride_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def operator(self) -> Optional[Employee]:
        return self._operator

    @operator.setter
    def operator(self, operator: Optional[Employee]):
        self._operator = operator
        logger.info("Ride [%s] operator set to: %s", self._name,
                    operator.name if operator is not None else "none")

    @property
    def max_rider(self) -> int:
        return self._max_rider

    @max_rider.setter
    def max_rider(self, value: int):
        if value < 1:
            logger.error("Ride [%s] capacity cannot be less than 1; keeping %d",
                         self._name, self._max_rider)
            return
        self._max_rider = value
        logger.info("Ride [%s] capacity per cycle set to %d", self._name, value)

    @property
    def num_of_cycles(self) -> int:
        return self._num_of_cycles

    @property
    def waiting_queue(self) -> Tuple[Visitor, ...]:
        return self.queue.snapshot()

    @property
    def history(self) -> Tuple[Visitor, ...]:
        with self._lock:
            return tuple(self._history)

    # ---- Eligibility ----
    def check_visitor_eligibility(self, visitor: Visitor) -> bool:
        eligible = self.ride_type.check_age(visitor)
        if not eligible:
            logger.error("%s (age %d) does not meet the %s ride age rule (%s)",
                         visitor.name, visitor.age, self.ride_type.value,
                         AGE_RULE_TEXT[self.ride_type])
        return eligible

    # ---- Waiting queue ----
    def enqueue(self, visitor: Optional[Visitor]) -> bool:
        """Append an eligible visitor to the tail of the waiting queue."""
        if visitor is None:
            logger.error("Ride [%s] cannot queue an empty visitor", self._name)
            return False
        if not self.check_visitor_eligibility(visitor):
            self._record("record_queue_reject", self._ride_id, self._name,
                         visitor.visitor_id, f"age={visitor.age}")
            return False

        self.queue.enqueue(visitor)
        length = self.queue.size()
        logger.info("Visitor [%s] joined the queue for [%s]; queue length %d",
                    visitor.visitor_id, self._name, length)
        self._record("record_queue_join", self._ride_id, self._name, visitor.visitor_id, length)
        return True

    def dequeue_front(self) -> Optional[Visitor]:
        removed = self.queue.dequeue()
        if removed is None:
            logger.error("Ride [%s] queue is empty; nobody to remove", self._name)
            return None
        logger.info("Visitor [%s] left the queue for [%s]; queue length %d",
                    removed.visitor_id, self._name, self.queue.size())
        return removed

    def describe_queue(self) -> List[str]:
        return [f"{i}. {v!r}" for i, v in enumerate(self.queue.snapshot(), start=1)]

    def print_queue(self):
        lines = self.describe_queue()
        print(f"\n========== [{self._name}] waiting queue (length {len(lines)}) ==========")
        if not lines:
            print("Nobody is waiting")
        for line in lines:
            print(line)

    # ---- History ----
    def add_to_history(self, visitor: Optional[Visitor]) -> bool:
        if visitor is None:
            logger.error("Ride [%s] cannot add an empty visitor to history", self._name)
            return False
        with self._lock:
            self._history.append(visitor)
            total = len(self._history)
        logger.info("Visitor [%s] added to [%s] history; %d in history",
                    visitor.visitor_id, self._name, total)
        return True

    def is_in_history(self, visitor: Optional[Visitor]) -> bool:
        if visitor is None:
            logger.error("Ride [%s] cannot look up an empty visitor", self._name)
            return False
        with self._lock:
            found = any(v.visitor_id == visitor.visitor_id for v in self._history)
        if found:
            logger.info("Visitor [%s] is in [%s] history", visitor.visitor_id, self._name)
        else:
            logger.info("Visitor [%s] is not in [%s] history", visitor.visitor_id, self._name)
        return found

    def number_of_visitors(self) -> int:
        with self._lock:
            count = len(self._history)
        logger.info("Ride [%s] history holds %d visitors", self._name, count)
        return count

    def describe_history(self) -> List[str]:
        return [f"{i}. {v!r}" for i, v in enumerate(self.history, start=1)]

    def print_ride_history(self):
        lines = self.describe_history()
        print(f"\n========== [{self._name}] ride history (total {len(lines)}) ==========")
        if not lines:
            print("No riders yet")
        for line in lines:
            print(line)

    def sort_history(self) -> bool:
        """Membership descending, then age ascending. Stable and idempotent."""
        with self._lock:
            if not self._history:
                logger.error("Ride [%s] history is empty; nothing to sort", self._name)
                return False
            self._history.sort(key=visitor_sort_key)
        logger.info("Ride [%s] history sorted (membership descending, then age ascending)",
                    self._name)
        return True

    # ---- Cycle ----
    def run_one_cycle(self) -> int:
        """
        Move up to max_rider visitors from the queue into history.
        Returns the number of riders, 0 when the cycle could not run.
        """
        with self._lock:
            if self._operator is None:
                logger.error("Ride [%s] cannot run: no operator assigned", self._name)
                return 0
            if self.queue.is_empty():
                logger.error("Ride [%s] cannot run: waiting queue is empty", self._name)
                return 0

            batch = self.queue.get_batch_for_boarding(self._max_rider)
            for rider in batch:
                self.add_to_history(rider)
            self._num_of_cycles += 1
            cycle = self._num_of_cycles

        logger.info("Ride [%s] cycle %d done: %d riders, %d still waiting",
                    self._name, cycle, len(batch), self.queue.size())
        self._record("record_board", self._ride_id, self._name, len(batch), cycle)
        return len(batch)

    # ---- Export / import ----
    def export_history(self, path: str) -> bool:
        rows = self.history
        if not rows:
            logger.error("Ride [%s] history is empty; nothing to export", self._name)
            return False

        try:
            with open(path, "w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f, lineterminator="\n")
                writer.writerow(HISTORY_HEADER)
                for v in rows:
                    writer.writerow([
                        v.visitor_id,
                        v.id,
                        _clean_name(v.name),
                        v.age,
                        v.membership_type.name,
                        "true" if v.has_insurance else "false",
                    ])
        except OSError as e:
            logger.error("Ride [%s] history export failed: %s", self._name, e)
            return False

        logger.info("Ride [%s] history exported to: %s", self._name, os.path.abspath(path))
        return True

    def import_history(self, path: str) -> int:
        """
        Read visitors from a history CSV and append the ones not already in history.
        Malformed rows are reported and skipped. Returns how many were appended.
        """
        if not os.path.exists(path):
            logger.error("Import failed: file does not exist: %s", os.path.abspath(path))
            return 0

        staged: List[Visitor] = []
        try:
            with open(path, "r", newline="", encoding="utf-8") as f:
                reader = csv.reader(f)
                next(reader, None)  # header
                for row in reader:
                    visitor = _parse_history_row(row)
                    if visitor is not None:
                        staged.append(visitor)
        except OSError as e:
            logger.error("Import of ride history failed: %s", e)
            return 0
        except (UnicodeDecodeError, csv.Error) as e:
            logger.error("Import failed: unreadable file %s (%s)", os.path.abspath(path), e)
            return 0

        added = 0
        with self._lock:
            for visitor in staged:
                if not self.is_in_history(visitor):
                    self.add_to_history(visitor)
                    added += 1
            total = len(self._history)

        logger.info("Imported from [%s]: %d rows read, %d added, history now %d",
                    path, len(staged), added, total)
        return added

    # ---- helpers ----
    def _record(self, method: str, *args):
        if self.metrics is None:
            return
        try:
            getattr(self.metrics, method)(*args)
        except (OSError, ValueError) as e:
            logger.warning("Could not record %s for ride [%s]: %s", method, self._name, e)

    def __getstate__(self):
        state = self.__dict__.copy()
        state.pop("_lock", None)
        state["metrics"] = None
        return state

    def __setstate__(self, state):
        self.__dict__.update(state)
        self._lock = threading.RLock()

    def __repr__(self):
        return (f"Ride(ride_id={self._ride_id!r}, name={self._name!r}, "
                f"type={self.ride_type.name}, max_rider={self._max_rider}, "
                f"cycles={self._num_of_cycles})")


def _clean_name(name: str) -> str:
    # a name must stay one plain field on one line
    for ch in (",", "\"", "\r", "\n"):
        name = name.replace(ch, " ")
    return name


def _parse_history_row(row: List[str]) -> Optional[Visitor]:
    line = ",".join(row)
    if len(row) != len(HISTORY_HEADER):
        logger.error("Skipping malformed line (expected %d fields): %s",
                     len(HISTORY_HEADER), line)
        return None

    visitor_id, person_id, name, age, membership, insurance = (p.strip() for p in row)
    try:
        age_value = int(age)
    except ValueError:
        logger.error("Skipping line with invalid age %r: %s", age, line)
        return None
    try:
        membership_type = MembershipType[membership]
    except KeyError:
        logger.error("Skipping line with unknown membership %r: %s", membership, line)
        return None

    return Visitor(person_id, name, age_value, visitor_id, membership_type,
                   insurance.lower() == "true")
