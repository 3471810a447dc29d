"""Probability models for how many minimisers sequencing errors destroy."""

from __future__ import annotations

import math
from collections.abc import Sequence

from valik.logspace import NEGATIVE_INF, add, pascal_row, subtract
from valik.minimiser import ForwardStrandMinimiser, Shape

__all__ = [
    "MersenneTwister64",
    "one_indirect_error_model",
    "one_error_model",
    "multiple_error_model",
]

_MASK64 = 0xFFFFFFFFFFFFFFFF
_INDIRECT_SEED = 0x1D2B8284D988C4D0
_INDIRECT_ITERATIONS = 10_000


class MersenneTwister64:
    """The 64-bit Mersenne Twister (MT19937-64) pseudo-random generator."""

    _N = 312
    _M = 156
    _MATRIX_A = 0xB5026F5AA96619E9
    _UPPER_MASK = 0xFFFFFFFF80000000
    _LOWER_MASK = 0x000000007FFFFFFF
    _INIT_MULTIPLIER = 6364136223846793005

    def __init__(self, seed: int = 5489) -> None:
        state = [seed & _MASK64]
        for i in range(1, self._N):
            prev = state[-1]
            state.append((self._INIT_MULTIPLIER * (prev ^ (prev >> 62)) + i) & _MASK64)
        self._state = state
        self._index = self._N

    def _twist(self) -> None:
        state = self._state
        n, m = self._N, self._M
        for i in range(n):
            x = (state[i] & self._UPPER_MASK) | (state[(i + 1) % n] & self._LOWER_MASK)
            shifted = x >> 1
            if x & 1:
                shifted ^= self._MATRIX_A
            state[i] = state[(i + m) % n] ^ shifted
        self._index = 0

    def next(self) -> int:
        """Return the next 64-bit output."""
        if self._index >= self._N:
            self._twist()
        y = self._state[self._index]
        self._index += 1
        y ^= (y >> 29) & 0x5555555555555555
        y ^= (y << 17) & 0x71D67FFFEDA60000
        y ^= (y << 37) & 0xFFF7EEE000000000
        y ^= y >> 43
        return y & _MASK64

    def randint(self, low: int, high: int) -> int:
        """Return a uniformly drawn integer in ``[low, high]``.

        Uses the multiply-and-reject method, so the draws match the common
        standard-library distribution over a 64-bit generator.
        """
        if low > high:
            raise ValueError("low must not exceed high")
        span = high - low
        if span > _MASK64:
            raise ValueError("range does not fit into 64 bits")
        if span == _MASK64:
            return low + self.next()
        bound = span + 1
        product = self.next() * bound
        low_bits = product & _MASK64
        if low_bits < bound:
            threshold = ((1 << 64) - bound) % bound
            while low_bits < threshold:
                product = self.next() * bound
                low_bits = product & _MASK64
        return low + (product >> 64)


def _log_count(count: float) -> float:
    return math.log(count) if count > 0 else NEGATIVE_INF


def one_indirect_error_model(query_length: int, window_size: int, shape: Shape) -> list[float]:
    """Estimate log probabilities that one error changes ``i`` minimisers indirectly.

    A fixed-seed simulation over random DNA; entry ``i`` of the result is the
    log frequency of ``i`` minimisers changing outside the k-mer hit by the error.
    """
    if query_length <= 0:
        raise ValueError("query length must be positive")
    kmer_size = shape.size()
    minimiser = ForwardStrandMinimiser(window_size, shape)
    generator = MersenneTwister64(_INDIRECT_SEED)
    counts = [0.0] * (window_size + 1)

    for _ in range(_INDIRECT_ITERATIONS):
        sequence = [generator.randint(0, 3) for _ in range(query_length)]
        original = set(minimiser.compute(sequence))

        error_position = generator.randint(0, query_length - 1)
        new_rank = generator.randint(0, 3)
        while new_rank == sequence[error_position]:
            new_rank = generator.randint(0, 3)
        sequence[error_position] = new_rank

        changed = original.symmetric_difference(minimiser.compute(sequence))
        affected = sum(
            1 for pos in changed if error_position < pos or pos + kmer_size < error_position
        )
        counts[affected] += 1

    log_iterations = math.log(_INDIRECT_ITERATIONS)
    return [_log_count(count) - log_iterations for count in counts]


def one_error_model(
    kmer_size: int,
    p_mean: float,
    affected_by_one_error_indirectly_prob: Sequence[float],
) -> list[float]:
    """Log probabilities that one error affects ``i`` minimisers, directly or indirectly.

    ``p_mean`` is the log probability that a minimiser starts at a given
    position. The result has as many entries as the indirect model.
    """
    if not affected_by_one_error_indirectly_prob:
        raise ValueError("indirect error model must not be empty")
    window_size = len(affected_by_one_error_indirectly_prob) - 1
    coefficients = pascal_row(kmer_size)
    probabilities = [NEGATIVE_INF] * (window_size + 1)
    inv_p_mean = subtract(0.0, p_mean)

    for i in range(kmer_size + 1):
        p_direct = coefficients[i] + i * p_mean + (kmer_size - i) * inv_p_mean
        for j in range(window_size - i + 1):
            probabilities[i + j] = add(
                probabilities[i + j], p_direct + affected_by_one_error_indirectly_prob[j]
            )

    total = NEGATIVE_INF
    for value in probabilities:
        total = add(total, value)
    return [value - total for value in probabilities]


def multiple_error_model(
    number_of_minimisers: int,
    errors: int,
    affected_by_one_error_prob: Sequence[float],
) -> list[float]:
    """Log probabilities that ``errors`` errors affect ``i`` minimisers in total."""
    if not affected_by_one_error_prob:
        raise ValueError("one-error model must not be empty")
    if errors < 0 or number_of_minimisers < 0:
        raise ValueError("counts must not be negative")
    options = len(affected_by_one_error_prob)
    window_size = options - 1
    max_affected = min(errors * window_size, number_of_minimisers)
    affected_by_error = [0] * errors

    def enumerate_configurations(to_affect: int, current_error: int, result: float) -> float:
        if not to_affect:
            current_prob = 0.0
            for index in range(current_error):
                current_prob += affected_by_one_error_prob[affected_by_error[index]]
            current_prob += (errors - current_error) * 0.0
            for _ in range(current_error, errors):
                current_prob += affected_by_one_error_prob[0]
            return add(result, current_prob)
        if current_error >= errors:
            return result
        for count in range(min(to_affect, options - 1) + 1):
            affected_by_error[current_error] = count
            result = enumerate_configurations(to_affect - count, current_error + 1, result)
        return result

    affected = []
    total = NEGATIVE_INF
    for i in range(max_affected + 1):
        result = enumerate_configurations(i, 0, NEGATIVE_INF)
        affected.append(result)
        total = add(total, result)

    return [value - total for value in affected]