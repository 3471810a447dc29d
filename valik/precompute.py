"""Precomputed minimiser thresholds and false-positive corrections, with an optional on-disk cache."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from pathlib import Path

from valik.error_models import multiple_error_model, one_error_model, one_indirect_error_model
from valik.logspace import NEGATIVE_INF, add, pascal_row
from valik.minimiser import Shape

__all__ = [
    "ThresholdParameters",
    "correction_filename",
    "threshold_filename",
    "precompute_correction",
    "precompute_threshold",
]

_UINT64 = struct.Struct("<Q")


@dataclass
class ThresholdParameters:
    """Everything needed to derive the number of minimisers a match must share."""

    window_size: int
    shape: Shape
    query_length: int
    errors: int = 0
    percentage: float = math.nan
    p_max: float = 0.0
    fpr: float = 0.0
    tau: float = 0.0
    cache_thresholds: bool = False
    output_directory: Path = field(default_factory=Path)

    def __post_init__(self) -> None:
        self.output_directory = Path(self.output_directory)


def _log(value: float) -> float:
    if value == 0:
        return NEGATIVE_INF
    if value < 0 or math.isnan(value):
        return math.nan
    return math.log(value)


def _format_double(value: float) -> str:
    return "%g" % value


def _drop_first(text: str, pattern: str) -> str:
    return text.replace(pattern, "", 1)


def correction_filename(parameters: ThresholdParameters) -> str:
    """Name of the cache file that holds false-positive corrections."""
    name = (
        f"correction_{parameters.query_length:x}_{parameters.window_size:x}_"
        f"{parameters.shape.to_int():x}_{_format_double(parameters.p_max)}_"
        f"{_format_double(parameters.fpr)}.bin"
    )
    return _drop_first(_drop_first(name, "0."), "0.")


def threshold_filename(parameters: ThresholdParameters) -> str:
    """Name of the cache file that holds thresholds."""
    name = (
        f"threshold_{parameters.query_length:x}_{parameters.window_size:x}_"
        f"{parameters.shape.to_int():x}_{parameters.errors & 0xFFFF:x}_"
        f"{_format_double(parameters.tau)}.bin"
    )
    return _drop_first(name, "0.")


def _write_cache(values: list[int], path: Path) -> None:
    payload = bytearray(_UINT64.pack(len(values)))
    for value in values:
        payload += _UINT64.pack(value)
    path.write_bytes(bytes(payload))


def _read_cache(path: Path) -> list[int]:
    data = path.read_bytes()
    if len(data) < _UINT64.size:
        raise ValueError(f"cache file {path} is truncated")
    (count,) = _UINT64.unpack_from(data, 0)
    if len(data) < _UINT64.size * (count + 1):
        raise ValueError(f"cache file {path} is truncated")
    return [_UINT64.unpack_from(data, _UINT64.size * (i + 1))[0] for i in range(count)]


def _cached(parameters: ThresholdParameters, filename: str) -> list[int] | None:
    path = parameters.output_directory / filename
    if not parameters.cache_thresholds or not path.exists():
        return None
    return _read_cache(path)


def _store(parameters: ThresholdParameters, filename: str, values: list[int]) -> None:
    if parameters.cache_thresholds:
        _write_cache(values, parameters.output_directory / filename)


def _minimiser_bounds(parameters: ThresholdParameters) -> tuple[int, int]:
    kmer_size = parameters.shape.size()
    if parameters.window_size == kmer_size:
        raise ValueError("window size equals the k-mer size; use the k-mer lemma")
    if not math.isnan(parameters.percentage):
        raise ValueError("a threshold percentage is set; no precomputation is needed")
    if parameters.window_size < kmer_size:
        raise ValueError("window size must not be smaller than the k-mer size")
    if parameters.query_length < parameters.window_size:
        raise ValueError("query length must not be smaller than the window size")
    kmers_per_window = parameters.window_size - kmer_size + 1
    kmers_per_pattern = parameters.query_length - kmer_size + 1
    minimal = kmers_per_pattern // kmers_per_window
    maximal = parameters.query_length - parameters.window_size + 1
    return minimal, maximal


def precompute_correction(parameters: ThresholdParameters) -> list[int]:
    """Expected false-positive minimiser count for every possible number of minimisers."""
    minimal, maximal = _minimiser_bounds(parameters)
    filename = correction_filename(parameters)
    cached = _cached(parameters, filename)
    if cached is not None:
        return cached

    log_fpr = _log(parameters.fpr)
    log_inv_fpr = _log(1.0 - parameters.fpr)
    log_p_max = _log(parameters.p_max)

    correction = []
    for number_of_minimisers in range(minimal, maximal + 1):
        coefficients = pascal_row(number_of_minimisers)

        def binom(number_of_fp: int) -> float:
            return (
                coefficients[number_of_fp]
                + number_of_fp * log_fpr
                + (number_of_minimisers - number_of_fp) * log_inv_fpr
            )

        number_of_fp = 1
        while number_of_fp <= number_of_minimisers and binom(number_of_fp) >= log_p_max:
            number_of_fp += 1
        correction.append(number_of_fp - 1)

    _store(parameters, filename, correction)
    return correction


def precompute_threshold(parameters: ThresholdParameters) -> list[int]:
    """Minimum number of unaffected minimisers for every possible number of minimisers."""
    minimal, maximal = _minimiser_bounds(parameters)
    filename = threshold_filename(parameters)
    cached = _cached(parameters, filename)
    if cached is not None:
        return cached

    kmer_size = parameters.shape.size()
    kmers_per_pattern = parameters.query_length - kmer_size + 1
    log_tau = _log(parameters.tau)

    indirect = one_indirect_error_model(
        parameters.query_length, parameters.window_size, parameters.shape
    )

    thresholds = []
    for number_of_minimisers in range(minimal, maximal + 1):
        uniform_start_index_prob = _log(number_of_minimisers) - math.log(kmers_per_pattern)
        one_error = one_error_model(kmer_size, uniform_start_index_prob, indirect)
        e_errors = multiple_error_model(number_of_minimisers, parameters.errors, one_error)

        max_affected = next(
            (i for i, value in enumerate(e_errors) if value == NEGATIVE_INF), len(e_errors)
        )

        cumulative = e_errors[0]
        affected = 0
        while cumulative < log_tau and affected < max_affected:
            affected += 1
            if affected < len(e_errors):
                cumulative = add(cumulative, e_errors[affected])

        thresholds.append(max(number_of_minimisers - affected, 0))

    _store(parameters, filename, thresholds)
    return thresholds