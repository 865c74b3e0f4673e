"""
ShirtSort error kinds.

Every error here is recovered inside the pipeline: the analyzer falls back to
the next detection stage or to the neutral default analysis.
"""


class ShirtSortError(Exception):
    """Base class for pipeline errors."""


class DecodeFailure(ShirtSortError):
    """Image bytes could not be read or decoded."""


class ClassifierUnavailable(ShirtSortError):
    """Classifier capability is missing or failed to initialize."""


class ClassifierInconclusive(ShirtSortError):
    """No classification label carried a known color name."""


class NoEligibleColorBucket(ShirtSortError):
    """No quantized color bucket passed the count and share thresholds."""
