import struct

import pytest

from valik.minimiser import Shape
from valik.precompute import (
    ThresholdParameters,
    correction_filename,
    precompute_correction,
    precompute_threshold,
    threshold_filename,
)


def _params(**overrides):
    values = dict(
        window_size=10,
        shape=Shape.ungapped(8),
        query_length=16,
        errors=1,
        p_max=0.15,
        fpr=0.05,
        tau=0.99,
    )
    values.update(overrides)
    return ThresholdParameters(**values)


def _read_cache_bytes(data):
    (count,) = struct.unpack_from("<Q", data, 0)
    return [struct.unpack_from("<Q", data, 8 * (i + 1))[0] for i in range(count)]


def _write_cache_bytes(path, values):
    path.write_bytes(struct.pack("<Q", len(values)) + b"".join(struct.pack("<Q", v) for v in values))


def test_correction_filename_format():
    params = ThresholdParameters(
        window_size=23, shape=Shape.ungapped(20), query_length=100, p_max=0.15, fpr=0.05
    )
    assert correction_filename(params) == "correction_64_17_fffff_15_05.bin"


def test_threshold_filename_format():
    params = ThresholdParameters(
        window_size=23, shape=Shape.ungapped(20), query_length=100, errors=2, tau=0.9999
    )
    assert threshold_filename(params) == "threshold_64_17_fffff_2_9999.bin"


def test_filenames_differ_between_parameter_sets():
    a = _params(fpr=0.05)
    b = _params(fpr=0.01)
    assert correction_filename(a) != correction_filename(b)
    assert threshold_filename(_params(errors=1)) != threshold_filename(_params(errors=2))


def test_correction_length_and_bounds():
    params = _params()
    correction = precompute_correction(params)
    minimal = (params.query_length - 8 + 1) // (params.window_size - 8 + 1)
    maximal = params.query_length - params.window_size + 1
    assert len(correction) == maximal - minimal + 1
    for n, value in zip(range(minimal, maximal + 1), correction):
        assert 0 <= value <= n


def test_correction_is_zero_for_negligible_fpr():
    correction = precompute_correction(_params(fpr=1e-9))
    assert correction and all(value == 0 for value in correction)


def test_correction_written_to_cache(tmp_path):
    params = _params(cache_thresholds=True, output_directory=tmp_path)
    correction = precompute_correction(params)
    cache_file = tmp_path / correction_filename(params)
    assert cache_file.exists()
    assert _read_cache_bytes(cache_file.read_bytes()) == correction


def test_correction_read_from_cache(tmp_path):
    params = _params(cache_thresholds=True, output_directory=tmp_path)
    _write_cache_bytes(tmp_path / correction_filename(params), [7, 8, 9])
    assert precompute_correction(params) == [7, 8, 9]


def test_cache_ignored_when_disabled(tmp_path):
    cached_dir = tmp_path / "cached"
    fresh_dir = tmp_path / "fresh"
    cached_dir.mkdir()
    fresh_dir.mkdir()
    params = _params(cache_thresholds=False, output_directory=cached_dir)
    cache_file = cached_dir / correction_filename(params)
    _write_cache_bytes(cache_file, [7, 8, 9])
    expected = precompute_correction(_params(cache_thresholds=False, output_directory=fresh_dir))
    assert precompute_correction(params) == expected
    assert len(expected) == 5
    assert _read_cache_bytes(cache_file.read_bytes()) == [7, 8, 9]


def test_truncated_cache_raises(tmp_path):
    params = _params(cache_thresholds=True, output_directory=tmp_path)
    (tmp_path / threshold_filename(params)).write_bytes(struct.pack("<Q", 5) + b"\x01")
    with pytest.raises(ValueError):
        precompute_threshold(params)


def test_threshold_read_from_cache(tmp_path):
    params = _params(cache_thresholds=True, output_directory=tmp_path)
    _write_cache_bytes(tmp_path / threshold_filename(params), [1, 2, 3, 4, 5])
    assert precompute_threshold(params) == [1, 2, 3, 4, 5]


@pytest.mark.parametrize("function", [precompute_correction, precompute_threshold])
def test_window_equal_to_kmer_rejected(function):
    with pytest.raises(ValueError):
        function(_params(window_size=8))


@pytest.mark.parametrize("function", [precompute_correction, precompute_threshold])
def test_percentage_rejected(function):
    with pytest.raises(ValueError):
        function(_params(percentage=0.5))


def test_query_shorter_than_window_rejected():
    with pytest.raises(ValueError):
        precompute_correction(_params(query_length=9))


def test_threshold_without_errors_keeps_every_minimiser(tmp_path):
    params = _params(errors=0, cache_thresholds=True, output_directory=tmp_path)
    thresholds = precompute_threshold(params)
    assert thresholds == list(range(3, 8))
    cache_file = tmp_path / threshold_filename(params)
    assert _read_cache_bytes(cache_file.read_bytes()) == thresholds
    assert precompute_threshold(params) == thresholds


def test_threshold_with_errors_bounded_by_minimiser_count():
    params = _params(errors=1)
    thresholds = precompute_threshold(params)
    minimal = (params.query_length - 8 + 1) // (params.window_size - 8 + 1)
    maximal = params.query_length - params.window_size + 1
    assert len(thresholds) == maximal - minimal + 1
    for n, value in zip(range(minimal, maximal + 1), thresholds):
        assert 0 <= value <= n