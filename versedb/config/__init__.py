from .aggregator_config import AggregatorConfig, DEFAULT_OUTPUT_NAME, DEFAULT_PATTERN, WELL_KNOWN_PATHS

__all__ = ["AggregatorConfig", "DEFAULT_OUTPUT_NAME", "DEFAULT_PATTERN", "WELL_KNOWN_PATHS"]
