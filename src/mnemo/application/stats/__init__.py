# Application Stats Package
from .metrics_calculator import MetricsCalculator, SessionStats, normalize_score

__all__ = ["MetricsCalculator", "SessionStats", "normalize_score"]
