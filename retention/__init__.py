"""
Retention engine

Spaced-repetition scheduling (SM-2), per-deck card selection, multi-deck
interleaved quiz sessions and learner progress tracking.
"""
__version__ = "1.0.0"
