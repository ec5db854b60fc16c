"""truthrank exceptions.

Only configuration problems raise. Malformed search records never do:
they degrade to absent evidence inside the scoring and classification
pipeline.
"""


class TruthRankError(Exception):
    """Base exception for truthrank errors."""


class ConfigurationError(TruthRankError):
    """Raised when configuration (e.g. the keyword dictionary file) cannot be loaded."""
