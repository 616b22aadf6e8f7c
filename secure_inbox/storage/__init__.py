from .base import MemoryStatsStore, StatsStore
from .secure import SecureStatsStore, StorageError
from .statistics import StatisticsAggregator

__all__ = [
    'MemoryStatsStore',
    'StatsStore',
    'SecureStatsStore',
    'StorageError',
    'StatisticsAggregator',
]
