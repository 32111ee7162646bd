"""
Pool outputs — statistics over ingested loans.
"""

from .metrics import PoolStats, compute_pool_stats

__all__ = ["PoolStats", "compute_pool_stats"]
