"""Baseline corpus and its startup initializer."""

from logsentinel.baseline.initializer import BaselineInitializer
from logsentinel.baseline.seeds import SEED_LOGS

__all__ = [
    "SEED_LOGS",
    "BaselineInitializer",
]
