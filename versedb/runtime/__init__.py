from .aggregation_writer import AggregationSummary, AggregationWriter
from .app_runner import AppRunner

__all__ = ["AggregationSummary", "AggregationWriter", "AppRunner"]
