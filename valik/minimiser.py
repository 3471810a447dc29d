"""Shapes, k-mer hashing and forward-strand minimisers over DNA."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass

__all__ = [
    "DEFAULT_SEED",
    "DEFAULT_SHAPE",
    "MAX_SHAPE_SIZE",
    "Shape",
    "adjust_seed",
    "adjust_bin_count",
    "kmer_hashes",
    "ForwardStrandMinimiser",
]

DEFAULT_SEED = 0x8F3F73B5CF1C9ADE
DEFAULT_SHAPE = "11111010010100110111111"
MAX_SHAPE_SIZE = 58

_UINT32_MAX = 0xFFFFFFFF
_DNA4_RANKS = {"A": 0, "C": 1, "G": 2, "T": 3, "U": 3}


@dataclass(frozen=True)
class Shape:
    """A k-mer shape: a bit pattern whose set bits select the hashed positions."""

    bits: int
    length: int

    def __post_init__(self) -> None:
        if not 0 < self.length <= MAX_SHAPE_SIZE:
            raise ValueError(f"shape length must be between 1 and {MAX_SHAPE_SIZE}")
        if self.bits < 0 or self.bits >> self.length:
            raise ValueError("shape bits do not fit the shape length")

    @classmethod
    def from_string(cls, text: str) -> "Shape":
        """Build a shape from a string of '0' and '1', leftmost bit first."""
        if not text or set(text) - {"0", "1"}:
            raise ValueError(f"invalid shape string: {text!r}")
        return cls(int(text, 2), len(text))

    @classmethod
    def ungapped(cls, size: int) -> "Shape":
        """Build a contiguous shape of ``size`` positions."""
        if size <= 0:
            raise ValueError("shape size must be positive")
        return cls((1 << size) - 1, size)

    def size(self) -> int:
        """Number of positions covered by the shape."""
        return self.length

    def count(self) -> int:
        """Number of positions that take part in the hash."""
        return bin(self.bits).count("1")

    def to_int(self) -> int:
        """The bit pattern as an integer."""
        return self.bits

    def positions(self) -> list[int]:
        """Offsets of the set positions, in left-to-right order."""
        return [j for j, bit in enumerate(format(self.bits, f"0{self.length}b")) if bit == "1"]

    def __str__(self) -> str:
        return format(self.bits, f"0{self.length}b")


def adjust_seed(kmer_size: int, seed: int = DEFAULT_SEED) -> int:
    """Shift ``seed`` so that only as many bits remain as a k-mer hash can use."""
    if not 1 <= kmer_size <= 32:
        raise ValueError("k-mer size must be between 1 and 32")
    return (seed & 0xFFFFFFFFFFFFFFFF) >> (64 - 2 * kmer_size)


def adjust_bin_count(n: int) -> int:
    """Round a segment count to a nearby multiple of 64 (at least 64)."""
    if n == _UINT32_MAX:
        return 64
    remainder = n % 64
    if remainder == 0:
        return n
    if remainder <= 32:
        return max((n & _UINT32_MAX) - remainder, 64)
    return n + 64 - remainder


def _ranks(text: str | Iterable[int]) -> list[int]:
    if isinstance(text, str):
        return [_DNA4_RANKS.get(char, 0) for char in text.upper()]
    ranks = list(text)
    for rank in ranks:
        if not 0 <= rank <= 3:
            raise ValueError(f"invalid DNA rank: {rank}")
    return ranks


def kmer_hashes(text: str | Iterable[int], shape: Shape) -> list[int]:
    """Hash every k-mer of ``text`` under ``shape``.

    ``text`` is a DNA string or a sequence of ranks 0-3. The selected
    characters form a base-4 number, the leftmost one most significant.
    """
    ranks = _ranks(text)
    offsets = shape.positions()
    span = shape.size()
    hashes = []
    for start in range(len(ranks) - span + 1):
        value = 0
        for offset in offsets:
            value = (value << 2) | ranks[start + offset]
        hashes.append(value)
    return hashes


class ForwardStrandMinimiser:
    """Minimisers of a text, ignoring the reverse complement."""

    def __init__(self, window_size: int, shape: Shape) -> None:
        self.minimiser_begin: list[int] = []
        self.resize(window_size, shape)

    def resize(self, window_size: int, shape: Shape) -> None:
        """Change the window size and shape."""
        if window_size < shape.size():
            raise ValueError("window size must not be smaller than the shape size")
        self.window_size = window_size
        self.shape = shape
        self.seed = adjust_seed(shape.count())

    def compute(self, text: str | Iterable[int]) -> list[int]:
        """Compute minimiser begin positions of ``text`` and store them in ``minimiser_begin``."""
        ranks = _ranks(text)
        shape_size = self.shape.size()
        if len(ranks) < self.window_size:
            raise ValueError("text is shorter than the window size")

        windows = len(ranks) - self.window_size + 1
        kmers_per_window = self.window_size - shape_size + 1
        hashes = [h ^ self.seed for h in kmer_hashes(ranks, self.shape)]

        self.minimiser_begin = []
        window = deque((hashes[i], i) for i in range(kmers_per_window))
        min_offset = min(range(len(window)), key=window.__getitem__)
        self.minimiser_begin.append(window[min_offset][1])

        for i in range(kmers_per_window, windows):
            new_hash = hashes[i + kmers_per_window - 1]
            window.append((new_hash, i))

            if new_hash < window[min_offset][1]:
                min_offset = len(window) - 1
                self.minimiser_begin.append(window[min_offset][1])
            elif min_offset == 0:
                inner = range(1, len(window) - 1)
                min_offset = min(inner, key=window.__getitem__) if inner else len(window) - 1
                self.minimiser_begin.append(window[min_offset][1])

            window.popleft()
            min_offset -= 1

        return self.minimiser_begin