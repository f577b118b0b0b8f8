"""
Ledger of every booking ever made, active and cancelled.

Persistence is a pickle of the full booking list. `load` reads the whole file
before touching memory, then clears the ledger and replaces it; it never merges.
"""

import enum
import logging
import os
import pickle
import threading
from typing import Iterator, List, Optional

from themepark.bookings.booking import Booking

logger = logging.getLogger(__name__)


class LoadStatus(str, enum.Enum):
    LOADED = "LOADED"
    MISSING = "MISSING"
    INCOMPATIBLE = "INCOMPATIBLE"
    IO_ERROR = "IO_ERROR"


# Raised by pickle.load for payloads it cannot rebuild.
# A corrupted length prefix surfaces as OverflowError or MemoryError.
_INCOMPATIBLE_ERRORS = (
    pickle.UnpicklingError,
    EOFError,
    AttributeError,
    ImportError,
    IndexError,
    TypeError,
    ValueError,
    OverflowError,
    MemoryError,
)


class BookingLedger:
    def __init__(self, ride_pool=None):
        self.ride_pool = ride_pool
        self._bookings: List[Booking] = []
        self._lock = threading.RLock()

    # ---- collection helpers ----
    def __len__(self) -> int:
        with self._lock:
            return len(self._bookings)

    def __iter__(self) -> Iterator[Booking]:
        with self._lock:
            return iter(list(self._bookings))

    def active_count(self) -> int:
        with self._lock:
            return sum(1 for b in self._bookings if not b.is_cancelled)

    # ---- mutations ----
    def add(self, booking: Optional[Booking]) -> bool:
        if booking is None:
            logger.error("Booking rejected: booking cannot be empty")
            return False
        if booking.is_cancelled:
            logger.error("Booking rejected: booking %s is already cancelled", booking.booking_id)
            return False

        with self._lock:
            if any(b.booking_id == booking.booking_id for b in self._bookings):
                logger.error("Booking rejected: booking %s already exists", booking.booking_id)
                return False
            self._bookings.append(booking)

        logger.info("Booking confirmed: %s | visitor: %s", booking.booking_id, booking.visitor.name)
        return True

    def cancel_by_id(self, booking_id: Optional[str]) -> Optional[Booking]:
        if booking_id is None or not booking_id.strip():
            logger.error("Cancellation failed: booking id cannot be empty")
            return None

        with self._lock:
            for booking in self._bookings:
                if booking.booking_id != booking_id:
                    continue
                if booking.is_cancelled:
                    logger.error("Cancellation failed: booking %s is already cancelled", booking_id)
                    return None
                booking.cancel()
                logger.info("Booking %s cancelled successfully", booking_id)
                return booking

        logger.error("Cancellation failed: booking %s not found", booking_id)
        return None

    # ---- queries ----
    def find_by_visitor_id(self, visitor_id: Optional[str]) -> List[Booking]:
        """Active bookings of one visitor, in the order they were made."""
        if visitor_id is None or not visitor_id.strip():
            logger.error("Lookup failed: visitor id cannot be empty")
            return []
        with self._lock:
            return [b for b in self._bookings
                    if not b.is_cancelled and b.visitor.visitor_id == visitor_id]

    def list_all_active(self) -> List[Booking]:
        """Active bookings, earliest booking time first."""
        with self._lock:
            active = [b for b in self._bookings if not b.is_cancelled]
        return sorted(active, key=lambda b: b.booking_time)

    def sort_by_membership_descending(self) -> List[Booking]:
        """A new list of all bookings, highest membership tier first. The ledger keeps its order."""
        with self._lock:
            snapshot = list(self._bookings)
        if not snapshot:
            logger.error("Cannot sort bookings: the ledger is empty")
            return []
        result = sorted(snapshot, key=lambda b: b.visitor.membership_type, reverse=True)
        logger.info("Bookings sorted by membership (platinum, gold, standard)")
        return result

    def print_all_bookings(self):
        active = self.list_all_active()
        print("\n===== Active bookings =====")
        if not active:
            print("No active bookings")
        for i, booking in enumerate(active, start=1):
            print(f"{i}. {booking.describe()}")
        print("===========================")

    # ---- persistence ----
    def save(self, path: Optional[str]) -> bool:
        if path is None or not path.strip():
            logger.error("Saving bookings failed: file path cannot be empty")
            return False

        with self._lock:
            snapshot = list(self._bookings)
            try:
                with open(path, "wb") as f:
                    pickle.dump(snapshot, f, protocol=pickle.HIGHEST_PROTOCOL)
            except FileNotFoundError:
                logger.error("Saving bookings failed: directory does not exist (%s)", path)
                return False
            except OSError as e:
                logger.error("Saving bookings failed: I/O error (%s)", e)
                return False
            except (pickle.PicklingError, TypeError, AttributeError) as e:
                logger.error("Saving bookings failed: bookings could not be serialized (%s)", e)
                return False

        logger.info("Bookings saved to: %s (%d including cancelled)",
                    os.path.abspath(path), len(snapshot))
        return True

    def load(self, path: Optional[str]) -> LoadStatus:
        if path is None or not path.strip():
            logger.error("Loading bookings failed: file path cannot be empty")
            return LoadStatus.MISSING
        if not os.path.exists(path):
            logger.error("Loading bookings failed: file does not exist (%s)", path)
            return LoadStatus.MISSING

        try:
            with open(path, "rb") as f:
                loaded = pickle.load(f)
        except OSError as e:
            logger.error("Loading bookings failed: I/O error (%s)", e)
            return LoadStatus.IO_ERROR
        except _INCOMPATIBLE_ERRORS as e:
            logger.error("Loading bookings failed: file is not a compatible booking list (%s)", e)
            return LoadStatus.INCOMPATIBLE

        if not isinstance(loaded, list) or not all(isinstance(b, Booking) for b in loaded):
            logger.error("Loading bookings failed: file is not a compatible booking list (%s)",
                         type(loaded).__name__)
            return LoadStatus.INCOMPATIBLE

        if self.ride_pool is not None:
            for booking in loaded:
                live = self.ride_pool.lookup(booking.ride.ride_id)
                if live is not None:
                    booking.attach_ride(live)

        with self._lock:
            self._bookings.clear()
            self._bookings.extend(loaded)
            total = len(self._bookings)
        logger.info("Bookings loaded from %s: %d total, %d active", path, total, self.active_count())
        return LoadStatus.LOADED
