"""Time series normalization."""

from dow_valuation.transform.normalizer import normalize, normalize_frame, shorten_label

__all__ = ["normalize", "normalize_frame", "shorten_label"]
