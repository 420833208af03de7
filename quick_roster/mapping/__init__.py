from .fields import fields_for, variations_for
from .matcher import ColumnMapping, MappingError, find_best_match, guess_mapping, normalize_header

__all__ = [
    "ColumnMapping",
    "MappingError",
    "fields_for",
    "find_best_match",
    "guess_mapping",
    "normalize_header",
    "variations_for",
]
