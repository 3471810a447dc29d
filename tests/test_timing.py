import pytest

from valik.timing import TIME_STATISTICS_HEADER, SearchTimeStatistics, write_time_statistics


def test_cart_min_and_max_pick_extremes():
    stats = SearchTimeStatistics(cart_processing_times=[0.7, 0.2, 1.9, 0.4])
    assert stats.cart_min() == 0.2
    assert stats.cart_max() == 1.9


def test_cart_avg_lies_between_extremes_and_sums_back():
    times = [0.7, 0.2, 1.9, 0.4]
    stats = SearchTimeStatistics(cart_processing_times=times)
    avg = stats.cart_avg()
    assert stats.cart_min() <= avg <= stats.cart_max()
    assert avg * len(times) == pytest.approx(sum(times))


def test_cart_min_without_carts_raises():
    stats = SearchTimeStatistics()
    with pytest.raises(ValueError):
        stats.cart_min()


def test_cart_avg_without_carts_raises():
    stats = SearchTimeStatistics()
    with pytest.raises(ValueError):
        stats.cart_avg()


def test_cart_max_without_carts_raises():
    stats = SearchTimeStatistics()
    with pytest.raises(ValueError):
        stats.cart_max()


def test_header_matches_report_layout():
    assert TIME_STATISTICS_HEADER.startswith("Ref I/O\tIBF I/O\t\tSearch\t")
    assert TIME_STATISTICS_HEADER.endswith("Consolidation\n")


def test_write_with_carts(tmp_path):
    path = tmp_path / "time.txt"
    stats = SearchTimeStatistics(
        ref_io_time=1.0,
        index_io_time=2.5,
        cart_processing_times=[0.5, 1.5],
        search_time=3.25,
        consolidation_time=0.5,
    )
    write_time_statistics(stats, path, 1000)
    lines = path.read_text().splitlines(keepends=True)
    assert lines[0] == TIME_STATISTICS_HEADER
    assert lines[1] == "1.00\t2.50\t3.25\t2000\t0.5000\t1.0000\t1.5000\t0.5000\n"


def test_write_without_carts_omits_cart_columns(tmp_path):
    path = tmp_path / "time.txt"
    stats = SearchTimeStatistics(
        ref_io_time=1.0, index_io_time=2.5, search_time=3.25, consolidation_time=0.5
    )
    write_time_statistics(stats, str(path), 1000)
    row = path.read_text().splitlines()[1]
    assert row == "1.00\t2.50\t3.25\t0.50"


def test_write_appends(tmp_path):
    path = tmp_path / "time.txt"
    stats = SearchTimeStatistics(cart_processing_times=[1.0])
    write_time_statistics(stats, path, 10)
    write_time_statistics(stats, path, 10)
    lines = path.read_text().splitlines(keepends=True)
    assert len(lines) == 4
    assert lines[0] == lines[2] == TIME_STATISTICS_HEADER
    assert lines[1] == lines[3]
    assert lines[1].split("\t")[3] == "10"