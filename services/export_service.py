"""
Export service: Generate product CSV files.

Writes drafts in the import template format so an export can be edited and
imported again. Also produces the sample template offered in the console.
"""

from typing import Iterable

import pandas as pd
import structlog

from exceptions import CsvExportError
from models.product import ProductDraft, DRAFT_FIELDS
from parsers.csv_parser import CSV_HEADER

logger = structlog.get_logger(__name__)


SAMPLE_DRAFTS = [
    ProductDraft(
        title="Premium Copper Wire 16 AWG",
        category="Electrical Cables",
        price="115",
        currency="INR",
        unit="Roll",
        stock="500",
        min_order_qty="10",
        keywords="copper wire, 16 awg, electrical cable",
        image_urls="https://example.com/images/copper-wire.jpg",
        short_description="Flexible 16 AWG copper wire for domestic wiring.",
        description="High conductivity copper wire with PVC insulation, rated for 1100 V.",
        features="99.9% pure copper",
        packaging="90 m roll, shrink wrapped",
        lead_time="3-5 days",
    ),
]


def drafts_to_dataframe(drafts: Iterable[ProductDraft]) -> pd.DataFrame:
    """
    Convert drafts to a DataFrame with the template header.

    Raises:
        CsvExportError: A field contains a line break (the importer is
                        line based and could not read it back)
    """
    rows = []
    problems = []

    for index, draft in enumerate(drafts, start=1):
        row = []
        for attribute in DRAFT_FIELDS:
            value = getattr(draft, attribute)
            if "\n" in value or "\r" in value:
                problems.append({"row": index, "title": draft.title, "field": attribute})
            row.append(value)
        rows.append(row)

    if problems:
        logger.warning("csv_export_rejected", problems=len(problems))
        raise CsvExportError(problems)

    return pd.DataFrame(rows, columns=list(CSV_HEADER), dtype=str)


def export_drafts_csv(drafts: Iterable[ProductDraft]) -> str:
    """
    Render drafts as CSV text.

    Fields containing commas or quotes are quoted; quotes are doubled.

    Returns:
        CSV document with header line
    """
    df = drafts_to_dataframe(drafts)
    logger.info("csv_export", rows=len(df))
    return df.to_csv(index=False, lineterminator="\n")


def sample_csv() -> str:
    """Template CSV with one example product."""
    return export_drafts_csv(SAMPLE_DRAFTS)
