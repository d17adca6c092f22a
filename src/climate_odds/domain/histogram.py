"""Equal-width histogram of a numeric sample."""

from typing import Iterable, Optional

import numpy as np

from climate_odds.domain.models import Histogram

DEFAULT_BINS = 20


def build_histogram(values: Iterable[Optional[float]], num_bins: int = DEFAULT_BINS) -> Histogram:
    """
    Partition values into num_bins equal-width bins between min and max.

    Bin index is floor((v - min) / width), clamped into [0, num_bins - 1] so
    the maximum lands in the last bin. When all values are equal the width
    is 0 and every value goes to bin 0. Non-finite values are ignored, so
    the counts always add up to the number of finite inputs.
    """
    if num_bins < 1:
        raise ValueError(f"num_bins must be at least 1, got {num_bins}")

    arr = np.array([v for v in values if v is not None], dtype=float)
    arr = arr[np.isfinite(arr)]

    if arr.size == 0:
        return Histogram(bin_edges=(), counts=(), bin_width=0.0)

    lo = float(arr.min())
    hi = float(arr.max())
    bin_width = (hi - lo) / num_bins

    edges = lo + np.arange(num_bins + 1) * bin_width

    if bin_width > 0:
        indices = np.floor((arr - lo) / bin_width).astype(int)
        indices = np.clip(indices, 0, num_bins - 1)
    else:
        indices = np.zeros(arr.size, dtype=int)

    counts = np.bincount(indices, minlength=num_bins)

    return Histogram(
        bin_edges=tuple(round(float(e), 2) for e in edges),
        counts=tuple(int(c) for c in counts),
        bin_width=round(bin_width, 2),
    )
