"""
File parsers module.
"""

from parsers.csv_parser import (
    CSV_COLUMNS,
    CSV_HEADER,
    CsvParseResult,
    clean_cell,
    normalize_header,
    parse_product_csv,
    split_csv_line,
    EMPTY_CSV_MESSAGE,
)

__all__ = [
    "CSV_COLUMNS",
    "CSV_HEADER",
    "CsvParseResult",
    "clean_cell",
    "normalize_header",
    "parse_product_csv",
    "split_csv_line",
    "EMPTY_CSV_MESSAGE",
]
