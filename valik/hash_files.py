"""Files of precomputed minimiser hashes stored as raw 64-bit integers."""

from __future__ import annotations

import struct
from collections.abc import Callable, Iterable, Iterator
from os import PathLike
from pathlib import Path

__all__ = ["iter_hashes", "write_hashes"]

_UINT64 = struct.Struct("<Q")
_MAX_UINT64 = 0xFFFFFFFFFFFFFFFF

PathArg = str | PathLike[str]


def _as_paths(paths: PathArg | Iterable[PathArg]) -> list[Path]:
    if isinstance(paths, (str, PathLike)):
        return [Path(paths)]
    return [Path(path) for path in paths]


def iter_hashes(
    paths: PathArg | Iterable[PathArg],
    predicate: Callable[[int], bool] | None = None,
) -> Iterator[int]:
    """Yield the hashes stored in one or more files, file after file.

    Each value is an unsigned 64-bit little-endian integer; incomplete
    trailing bytes are ignored. With ``predicate``, only hashes for which it
    returns true are yielded.
    """
    for path in _as_paths(paths):
        with path.open("rb") as handle:
            while True:
                chunk = handle.read(_UINT64.size)
                if len(chunk) < _UINT64.size:
                    break
                (value,) = _UINT64.unpack(chunk)
                if predicate is None or predicate(value):
                    yield value


def write_hashes(path: PathArg, hashes: Iterable[int]) -> int:
    """Write hashes to ``path`` as raw 64-bit integers; return how many were written."""
    count = 0
    with Path(path).open("wb") as handle:
        for value in hashes:
            if not 0 <= value <= _MAX_UINT64:
                raise ValueError(f"hash {value} does not fit into 64 bits")
            handle.write(_UINT64.pack(value))
            count += 1
    return count