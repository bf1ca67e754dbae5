"""Bulk import loaders: validate parsed sheets and write them to the store."""

from .financials import import_financials
from .offices import import_offices
from .utils import ImportSummary
from .weekly_volume import import_weekly_volume

__all__ = [
    "ImportSummary",
    "import_financials",
    "import_offices",
    "import_weekly_volume",
]
