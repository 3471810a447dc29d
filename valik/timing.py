"""Wall-clock statistics gathered during a search and their tabular report."""

from __future__ import annotations

from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path

__all__ = ["TIME_STATISTICS_HEADER", "SearchTimeStatistics", "write_time_statistics"]

TIME_STATISTICS_HEADER = (
    "Ref I/O\tIBF I/O\t\tSearch\tEffective query count\t"
    "Min cart time\tAvg cart time\tMax cart time\tConsolidation\n"
)


@dataclass
class SearchTimeStatistics:
    """Times, in seconds, spent in the stages of a search."""

    ref_io_time: float = 0.0
    index_io_time: float = 0.0
    cart_processing_times: list[float] = field(default_factory=list)
    search_time: float = 0.0
    consolidation_time: float = 0.0

    def _require_carts(self) -> None:
        if not self.cart_processing_times:
            raise ValueError("no cart processing times were recorded")

    def cart_min(self) -> float:
        """Shortest time spent processing one cart."""
        self._require_carts()
        return min(self.cart_processing_times)

    def cart_avg(self) -> float:
        """Mean time spent processing one cart."""
        self._require_carts()
        return sum(self.cart_processing_times) / len(self.cart_processing_times)

    def cart_max(self) -> float:
        """Longest time spent processing one cart."""
        self._require_carts()
        return max(self.cart_processing_times)


def write_time_statistics(
    statistics: SearchTimeStatistics,
    time_file: str | PathLike[str],
    cart_max_capacity: int,
) -> None:
    """Append a header and one row of timings to ``time_file``.

    The effective query count is the number of processed carts times the
    cart capacity, an upper bound since some carts are only partly filled.
    Cart columns are left out when no cart was processed.
    """
    fields = [
        f"{statistics.ref_io_time:.2f}",
        f"{statistics.index_io_time:.2f}",
        f"{statistics.search_time:.2f}",
    ]
    precision = 2
    if statistics.cart_processing_times:
        precision = 4
        fields += [
            str(len(statistics.cart_processing_times) * cart_max_capacity),
            f"{statistics.cart_min():.4f}",
            f"{statistics.cart_avg():.4f}",
            f"{statistics.cart_max():.4f}",
        ]
    fields.append(f"{statistics.consolidation_time:.{precision}f}")

    with Path(time_file).open("a", encoding="utf-8") as handle:
        handle.write(TIME_STATISTICS_HEADER)
        handle.write("\t".join(fields) + "\n")