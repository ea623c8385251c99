from findscan.indicators.bollinger import (
    BollingerBandsIndicator,
    BollingerBandsInput,
    BollingerBandsOutput,
    ValidationError,
    apply_offset,
    compute_bollinger_bands,
    compute_bollinger_bands_at_index,
    validate_bollinger_bands_input,
)
from findscan.indicators.source import get_source_value, get_source_values

__all__ = [
    "BollingerBandsIndicator", "BollingerBandsInput", "BollingerBandsOutput",
    "ValidationError", "apply_offset",
    "compute_bollinger_bands", "compute_bollinger_bands_at_index",
    "validate_bollinger_bands_input",
    "get_source_value", "get_source_values",
]
