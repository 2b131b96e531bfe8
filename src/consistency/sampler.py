"""Uniform random combinations (Floyd's algorithm)."""

import numpy as np


def sample_combination(
    pool_size: int, count: int, rng: np.random.Generator
) -> np.ndarray:
    """
    Pick a uniformly random subset of fixed size.

    Every one of the C(pool_size, count) masks is equally likely. Runs in
    O(count) draws without shuffling the pool.

    Args:
        pool_size: Length of the mask.
        count: Number of True entries.
        rng: Random source.

    Returns:
        Boolean array of length pool_size with exactly count True entries.

    Raises:
        ValueError: If count is negative or larger than pool_size.
    """
    if count < 0:
        raise ValueError(f"Cannot choose a negative count ({count})")
    if count > pool_size:
        raise ValueError(f"Cannot choose {count} of {pool_size}")

    mask = np.zeros(pool_size, dtype=bool)
    for j in range(pool_size - count + 1, pool_size + 1):
        r = int(rng.integers(1, j, endpoint=True))
        if mask[r - 1]:
            mask[j - 1] = True
        else:
            mask[r - 1] = True
    return mask
