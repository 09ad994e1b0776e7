"""
Row-partitioned parallel map.

Each task owns a disjoint [start, stop) band of output rows and returns
its own result; results come back in band order (not completion order) so
callers can merge them by index without locks.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple, TypeVar

T = TypeVar("T")


def row_bands(n_rows: int, band_rows: int) -> List[Tuple[int, int]]:
    """Split range(n_rows) into consecutive [start, stop) bands."""
    band_rows = max(1, band_rows)
    return [(start, min(start + band_rows, n_rows)) for start in range(0, n_rows, band_rows)]


def map_row_bands(
    func: Callable[[int, int], T],
    n_rows: int,
    workers: Optional[int] = None,
    band_rows: int = 16,
) -> List[Tuple[int, T]]:
    """
    Run func(start, stop) for every band.

    Args:
        func: Band worker; must only read shared input
        n_rows: Total number of output rows
        workers: Thread count (None = executor default, 1 = run inline)
        band_rows: Rows per band

    Returns:
        [(start, result), ...] ordered by start

    Raises:
        ValueError: workers < 1
    """
    if workers is not None and workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    bands = row_bands(n_rows, band_rows)
    if workers == 1 or len(bands) <= 1:
        return [(start, func(start, stop)) for start, stop in bands]

    with ThreadPoolExecutor(max_workers=workers) as executor:
        # map() yields in submission order
        results = executor.map(lambda band: func(*band), bands)
        return [(start, result) for (start, _), result in zip(bands, results)]
