"""Minimisers, error models, minimiser-count thresholds and alignment summaries for DNA local alignment search."""

__version__ = "1.0.0"