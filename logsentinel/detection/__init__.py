"""Anomaly detection module."""

from logsentinel.detection.detector import AnomalyDetector, SemanticAnomalyDetector
from logsentinel.detection.models import AnomalyVerdict

__all__ = [
    "AnomalyDetector",
    "AnomalyVerdict",
    "SemanticAnomalyDetector",
]
