# valik

Building blocks for a k-mer prefilter placed in front of local alignment
search on DNA sequences. The package is pure Python and has no runtime
dependencies.

## Modules

- `valik.minimiser`
  - `Shape`: a k-mer shape as a bit pattern. Build one with
    `Shape.from_string("1101")` or `Shape.ungapped(20)`. `size()` is the
    span, `count()` the number of set positions, `to_int()` the pattern.
  - `kmer_hashes(text, shape)`: base-4 hash of every k-mer of a DNA string
    or a sequence of ranks 0-3 (leftmost base most significant; letters
    other than A, C, G, T, U count as rank 0).
  - `adjust_seed(kmer_size, seed=DEFAULT_SEED)`: shifts the seed so it only
    covers the bits a k-mer hash can use (k-mer size 1 to 32).
  - `adjust_bin_count(n)`: rounds a segment count to a nearby multiple of 64,
    never below 64.
  - `ForwardStrandMinimiser(window_size, shape)`: `compute(text)` returns the
    begin positions of the window minimisers (hashes XORed with the adjusted
    seed, reverse complement ignored) and keeps them in `minimiser_begin`;
    `resize(window_size, shape)` changes the parameters.
- `valik.logspace`: `add(log_x, log_y, *args)` and `subtract(log_x, log_y)`
  on probabilities held as natural logs, and `pascal_row(n)`, a row of log
  binomial coefficients built from integer ratios.
- `valik.error_models`
  - `MersenneTwister64`: the 64-bit Mersenne Twister, with `next()` and
    `randint(low, high)` (inclusive bounds).
  - `one_indirect_error_model(query_length, window_size, shape)`: a
    fixed-seed simulation of 10,000 random sequences estimating the log
    probability that one error changes `i` minimisers outside the k-mer it
    hits. Deterministic, but takes a while in Python.
  - `one_error_model(kmer_size, p_mean, indirect)` and
    `multiple_error_model(number_of_minimisers, errors, one_error)`: log
    probabilities that one error, or `errors` errors, affect `i` minimisers.
- `valik.precompute`
  - `ThresholdParameters`: window size, shape, query length, errors,
    percentage (NaN when unused), `p_max`, `fpr`, `tau`, `cache_thresholds`
    and `output_directory`.
  - `precompute_threshold(parameters)` and `precompute_correction(parameters)`:
    one value per possible number of minimisers in a query. They raise
    `ValueError` when the window size equals the k-mer size, when a
    percentage is set, or when the sizes do not fit together.
  - `threshold_filename(parameters)` and `correction_filename(parameters)`:
    names of the cache files. With `cache_thresholds=True` the results are
    read from and written to `output_directory` as a little-endian 64-bit
    count followed by that many 64-bit values.
- `valik.threshold`
  - `Threshold(parameters)` picks a `ThresholdKind`: `PERCENTAGE` when a
    percentage is given, `LEMMA` when the window holds exactly one k-mer,
    otherwise `PROBABILISTIC` (precomputed thresholds plus corrections).
  - `Threshold.get(minimiser_count)` returns the number of minimisers a
    query must share; at least 1 except for the lemma value itself.
- `valik.alignment`
  - `AlignmentRow(source, gapped, begin=0)`: one aligned row, gaps written
    as `-`; the row's residues must equal `source[begin:]`.
  - `get_cigar_line(row0, row1)`: CIGAR string and comma-separated mutation
    list (1-based query position plus query base) for a database row and a
    query row.
  - `analyze_alignment(row0, row1)`: alignment length and matching columns.
  - `compute_identity(row0, row1)`: percent identity, truncated to four
    decimals.
  - `write_disabled_queries(disabled_query_ids, ids, queries, stream)`:
    writes the selected queries as FASTA records.
- `valik.timing`: `SearchTimeStatistics` with `cart_min()`, `cart_avg()` and
  `cart_max()` (each raises `ValueError` if no cart time was recorded), and
  `write_time_statistics(statistics, time_file, cart_max_capacity)`, which
  appends a tab-separated header and row to a file.
- `valik.hash_files`: `write_hashes(path, hashes)` stores 64-bit hashes as
  raw little-endian integers and returns the count; `iter_hashes(paths,
  predicate=None)` yields them back from one file or several.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Example

```python
import math

from valik.minimiser import ForwardStrandMinimiser, Shape
from valik.precompute import ThresholdParameters
from valik.threshold import Threshold, ThresholdKind

shape = Shape.ungapped(4)
minimiser = ForwardStrandMinimiser(6, shape)
print(minimiser.compute("ACGTACGTTGCA"))

lemma = Threshold(ThresholdParameters(window_size=20, shape=Shape.ungapped(20),
                                      query_length=100, errors=1))
assert lemma.kind is ThresholdKind.LEMMA
print(lemma.get(50))   # 100 + 1 - 2 * 20 = 61

share = Threshold(ThresholdParameters(window_size=24, shape=Shape.ungapped(20),
                                      query_length=100, percentage=0.5))
print(share.get(30))   # 15
```

A probabilistic threshold is built the same way with `percentage` left at
its default (`math.nan`), a window larger than the shape, and `p_max`,
`fpr` and `tau` set; the first construction runs the error simulation.

## What it does not do

The package offers library functions only. It installs no command-line
program, does not read or split FASTA/FASTQ files, does not build or query
an index of reference segments, and does not run the alignment search or
write match records in GFF. It supplies the threshold computation,
minimiser and hash handling, and alignment summaries such a tool needs.