import csv
import logging
import os
import threading
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from themepark.core import Clock

logger = logging.getLogger(__name__)

FIELDNAMES = [
    "time",
    "event",
    # common fields
    "ride_id",
    "ride_name",
    "visitor_id",
    "booking_id",
    "count",
    "reason",
]


class MetricsRecorder:
    """
    Thread-safe CSV log of park events.
    Call record_* methods from rides, the ride pool or the booking workflow.
    """

    def __init__(self, out_dir: str = "results", filename: str = "metrics.csv",
                 clock: Optional[Clock] = None):
        self.out_dir = out_dir
        self.filename = filename
        self.clock = clock or Clock()
        self._path = os.path.join(out_dir, filename)
        os.makedirs(out_dir, exist_ok=True)

        # Create file with header if new/empty
        self._lock = threading.Lock()
        new_file = not os.path.exists(self._path) or os.path.getsize(self._path) == 0
        self._fh = open(self._path, "a", newline="", encoding="utf-8")
        self._writer = csv.DictWriter(self._fh, fieldnames=FIELDNAMES)
        if new_file:
            self._writer.writeheader()
            self._fh.flush()

    @property
    def path(self) -> str:
        return self._path

    # ---------- low-level write ----------
    def _write(self, row: dict):
        row["time"] = self.clock.now().strftime("%Y-%m-%d %H:%M:%S")
        with self._lock:
            self._writer.writerow(row)
            self._fh.flush()

    # ---------- queue ----------
    def record_queue_join(self, ride_id: str, ride_name: str, visitor_id: str, queue_length: int):
        self._write({
            "event": "queue_join",
            "ride_id": ride_id,
            "ride_name": ride_name,
            "visitor_id": visitor_id,
            "count": queue_length,
        })

    def record_queue_reject(self, ride_id: str, ride_name: str, visitor_id: str, reason: str):
        self._write({
            "event": "queue_reject",
            "ride_id": ride_id,
            "ride_name": ride_name,
            "visitor_id": visitor_id,
            "reason": reason,
        })

    # ---------- cycles ----------
    def record_board(self, ride_id: str, ride_name: str, count: int, cycle: int):
        self._write({
            "event": "ride_board",
            "ride_id": ride_id,
            "ride_name": ride_name,
            "count": count,
            "reason": f"cycle={cycle}",
        })

    # ---------- bookings ----------
    def record_booking(self, booking_id: str, ride_id: str, visitor_id: str):
        self._write({
            "event": "booking",
            "booking_id": booking_id,
            "ride_id": ride_id,
            "visitor_id": visitor_id,
        })

    def record_cancel(self, booking_id: str, ride_id: str, visitor_id: str):
        self._write({
            "event": "booking_cancel",
            "booking_id": booking_id,
            "ride_id": ride_id,
            "visitor_id": visitor_id,
        })

    # ---------- cleanup ----------
    def close(self):
        with self._lock:
            if self._fh.closed:
                return
            try:
                self._fh.flush()
            finally:
                self._fh.close()

    # ---------- read back ----------
    def read_events(self, event: Optional[str] = None) -> List[dict]:
        with self._lock:
            if not self._fh.closed:
                self._fh.flush()
        with open(self._path, "r", newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        if event is None:
            return rows
        return [r for r in rows if r["event"] == event]

    def ridership_by_ride(self) -> Dict[str, List[int]]:
        """Riders per cycle, in cycle order, keyed by ride name."""
        data: Dict[str, List[int]] = defaultdict(list)
        for row in self.read_events("ride_board"):
            name = row.get("ride_name", "")
            if name:
                data[name].append(int(row.get("count") or 0))
        return dict(data)

    # ---------- visualization ----------
    def generate_ridership_graph(self, include_rides: Optional[Iterable[str]] = None) -> Optional[str]:
        """Plot riders per cycle for every ride. Returns the image path, or None if no data."""
        import matplotlib
        matplotlib.use("Agg")  # Non-interactive backend
        import matplotlib.pyplot as plt

        data = self.ridership_by_ride()
        if include_rides is not None:
            wanted = set(include_rides)
            data = {k: v for k, v in data.items() if k in wanted}

        if not data:
            logger.warning("No ridership data available for graphing")
            return None

        plt.figure(figsize=(12, 5))
        for ride_name, counts in sorted(data.items()):
            cycles = list(range(1, len(counts) + 1))
            plt.plot(cycles, counts, marker="o", label=ride_name, linewidth=1.5, alpha=0.8)

        plt.xlabel("Cycle", fontsize=12)
        plt.ylabel("Riders", fontsize=12)
        plt.title("Riders per Cycle", fontsize=14, fontweight="bold")
        plt.legend(loc="upper right", fontsize=9)
        plt.grid(True, alpha=0.3)
        plt.tight_layout()

        graph_path = os.path.join(self.out_dir, "ridership_graph.png")
        plt.savefig(graph_path, dpi=150)
        plt.close()

        logger.info("Ridership graph saved to: %s", graph_path)
        return graph_path
