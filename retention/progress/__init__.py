"""
Learner progress: lifetime counters and daily streaks
"""
from .tracker import ProgressTracker

__all__ = ["ProgressTracker"]
