from adsets.processing.normalization import standardize, standardize_pair

__all__ = ["standardize", "standardize_pair"]
