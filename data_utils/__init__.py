"""
Data handling utility modules for the Correlation Calculator
"""

from .data_loaders import (
    DataFileError,
    validate_csv_path,
    parse_csv_text,
    load_csv_columns
)

__all__ = [
    'DataFileError',
    'validate_csv_path',
    'parse_csv_text',
    'load_csv_columns'
]
