"""Decide how many minimisers a query window must share with a bin."""

from __future__ import annotations

import math
from enum import Enum

from valik.precompute import ThresholdParameters, precompute_correction, precompute_threshold

__all__ = ["ThresholdKind", "Threshold"]


class ThresholdKind(Enum):
    """How the threshold is derived."""

    PROBABILISTIC = "probabilistic"
    LEMMA = "lemma"
    PERCENTAGE = "percentage"


class Threshold:
    """Minimiser-count threshold derived from a set of parameters."""

    def __init__(self, parameters: ThresholdParameters) -> None:
        kmer_size = parameters.shape.size()
        self.kmer_lemma = 0
        self.percentage = 0.0
        self.minimal_number_of_minimisers = 0
        self.maximal_number_of_minimisers = 0
        self.correction: list[int] = []
        self.thresholds: list[int] = []

        if not math.isnan(parameters.percentage):
            self.kind = ThresholdKind.PERCENTAGE
            self.percentage = parameters.percentage
            return

        if parameters.window_size < kmer_size:
            raise ValueError("window size must not be smaller than the k-mer size")
        kmers_per_window = parameters.window_size - kmer_size + 1

        if kmers_per_window == 1:
            self.kind = ThresholdKind.LEMMA
            minuend = parameters.query_length + 1
            subtrahend = (parameters.errors + 1) * kmer_size
            self.kmer_lemma = minuend - subtrahend if minuend > subtrahend else 1
            return

        self.kind = ThresholdKind.PROBABILISTIC
        kmers_per_pattern = parameters.query_length - kmer_size + 1
        self.minimal_number_of_minimisers = kmers_per_pattern // kmers_per_window
        self.maximal_number_of_minimisers = parameters.query_length - parameters.window_size + 1
        self.correction = precompute_correction(parameters)
        self.thresholds = precompute_threshold(parameters)

    def get(self, minimiser_count: int) -> int:
        """Threshold for a query window holding ``minimiser_count`` minimisers."""
        if self.kind is ThresholdKind.LEMMA:
            return self.kmer_lemma
        if self.kind is ThresholdKind.PERCENTAGE:
            return max(1, int(minimiser_count * self.percentage))
        clamped = min(
            max(minimiser_count, self.minimal_number_of_minimisers),
            self.maximal_number_of_minimisers,
        )
        index = clamped - self.minimal_number_of_minimisers
        return max(1, self.thresholds[index] + self.correction[index])