"""Fitness metric contract and cache."""

from .cache import FitnessCache
from .metric import CallableMetric, FitnessMetric, ProgramSetMetric

__all__ = [
    'FitnessCache',
    'CallableMetric',
    'FitnessMetric',
    'ProgramSetMetric',
]
