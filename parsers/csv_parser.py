"""
CSV parser for bulk product imports.

Parses the product template (one product per line) into ProductDraft rows.

Format:
    - First non-blank line is the header; columns may come in any order.
    - Header cells are matched case-insensitively with whitespace removed.
    - Fields may be wrapped in double quotes to contain commas; a literal
      quote inside a quoted field is written as two quotes.
    - Line based: a quoted field cannot span lines.
"""

from dataclasses import dataclass, field
from typing import Optional
import re
import structlog

from exceptions import SchemaError
from models.product import ProductDraft, DRAFT_FIELDS, DEFAULT_CURRENCY, DEFAULT_UNIT
from utils.text_utils import normalize_column_name

logger = structlog.get_logger(__name__)


# Normalized header name -> ProductDraft attribute
CSV_COLUMNS: dict[str, str] = {
    normalize_column_name(name.replace("_", "")): name
    for name in DRAFT_FIELDS
}

# Header written by exports and the sample template
CSV_HEADER: tuple[str, ...] = tuple(CSV_COLUMNS.keys())

_LINE_BREAK = re.compile(r"\r?\n")

EMPTY_CSV_MESSAGE = "No header row detected."


# ===================
# DATA CLASSES
# ===================

@dataclass
class CsvParseResult:
    """Result of parsing a product CSV document."""
    drafts: list[ProductDraft] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)
    unknown_columns: list[str] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.drafts)


# ===================
# LINE LEVEL
# ===================

def split_csv_line(line: str) -> list[str]:
    """
    Split one CSV line into raw field strings.

    'Wire,"16 AWG, copper",10'   -> ['Wire', '16 AWG, copper', '10']
    '"6"" pipe",2'                -> ['6" pipe', '2']
    'a,b,'                        -> ['a', 'b', '']

    Args:
        line: Single line of text without its line terminator

    Returns:
        Field strings in column order (always at least one)
    """
    values: list[str] = []
    current: list[str] = []
    inside_quotes = False
    index = 0

    while index < len(line):
        character = line[index]

        if character == '"':
            if inside_quotes and index + 1 < len(line) and line[index + 1] == '"':
                current.append('"')
                index += 2
                continue
            inside_quotes = not inside_quotes
        elif character == "," and not inside_quotes:
            values.append("".join(current))
            current = []
        else:
            current.append(character)

        index += 1

    values.append("".join(current))
    return values


def clean_cell(value: str) -> str:
    """
    Trim a header cell and unwrap it if it is still quoted.

    Header names never contain quotes, so a leftover pair is packaging.
    Data cells are only trimmed: their quotes were already decoded by
    split_csv_line and anything left is part of the value.
    """
    trimmed = value.strip()
    if len(trimmed) >= 2 and trimmed.startswith('"') and trimmed.endswith('"'):
        return trimmed[1:-1].replace('""', '"')
    return trimmed


def normalize_header(cells: list[str]) -> list[str]:
    """Normalize every header cell for column lookup."""
    return [normalize_column_name(clean_cell(cell)) for cell in cells]


# ===================
# DOCUMENT LEVEL
# ===================

def _non_blank_lines(text: str) -> list[str]:
    """Split text into lines, trimming and dropping blank ones."""
    return [line.strip() for line in _LINE_BREAK.split(text) if line.strip()]


def _cell(cells: list[str], index: Optional[int]) -> str:
    """Value at index, empty string for short rows."""
    if index is None or index >= len(cells):
        return ""
    return cells[index]


def parse_product_csv(text: str) -> CsvParseResult:
    """
    Parse a whole product CSV document.

    Args:
        text: File contents (already decoded)

    Returns:
        CsvParseResult with one ProductDraft per non-blank data line

    Raises:
        SchemaError: No header row, or required columns missing. No rows
                     are returned in that case.
    """
    lines = _non_blank_lines(text)

    if not lines:
        logger.warning("csv_empty")
        raise SchemaError(
            missing_columns=list(CSV_HEADER),
            message=EMPTY_CSV_MESSAGE
        )

    header_line, *rows = lines
    headers = normalize_header(split_csv_line(header_line))

    missing = [column for column in CSV_HEADER if column not in headers]
    if missing:
        logger.warning("csv_headers_mismatch", missing=missing)
        raise SchemaError(missing_columns=missing)

    # First occurrence wins when a column is repeated
    positions: dict[str, int] = {}
    for index, name in enumerate(headers):
        positions.setdefault(name, index)

    result = CsvParseResult(
        headers=headers,
        unknown_columns=[name for name in headers if name not in CSV_COLUMNS],
    )

    for row_line in rows:
        cells = [value.strip() for value in split_csv_line(row_line)]
        values = {
            attribute: _cell(cells, positions.get(column))
            for column, attribute in CSV_COLUMNS.items()
        }
        values["currency"] = values["currency"] or DEFAULT_CURRENCY
        values["unit"] = values["unit"] or DEFAULT_UNIT
        result.drafts.append(ProductDraft(**values))

    logger.info(
        "csv_parsed",
        rows=result.row_count,
        unknown_columns=result.unknown_columns or None,
    )
    return result
