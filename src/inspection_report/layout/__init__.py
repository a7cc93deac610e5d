"""
Module: inspection_report.layout

Purpose:
    Page layout for inspection reports.
    Converts extracted answer records into numbered, fixed-capacity pages.

Key Functions:
    - paginate(): Arrange records onto content pages
    - insert_fixed_pages(): Add cover, project, gallery and signature pages
    - build_numbering(): Section ordinals and item Roman numerals
    - item_weight(): Printed space estimate of one item

Key Classes:
    - PaginationConfig: Configuration for pagination
    - PackedItem: Weighted renderable unit
    - Page: Single content page
    - ReportLayout: Final page list

Dependencies:
    - inspection_report.core.models: AnswerRecord, SectionDescriptor

Used By:
    - inspection_report.controller: Report pipeline
    - inspection_report.output: PDF rendering
"""

from .config import PaginationConfig
from .models import (
    ContentLayout,
    GalleryEntry,
    PackedItem,
    Page,
    PageGroup,
    PageKind,
    ReportLayout,
    ReportPage,
)
from .weights import item_weight, record_weight
from .numbering import SectionNumbering, assign_item_ordinals, build_numbering, number_sections
from .paginator import paginate, split_record
from .pages import collect_gallery, insert_fixed_pages

__all__ = [
    # Config
    "PaginationConfig",
    # Models
    "ContentLayout",
    "GalleryEntry",
    "PackedItem",
    "Page",
    "PageGroup",
    "PageKind",
    "ReportLayout",
    "ReportPage",
    # Functions
    "item_weight",
    "record_weight",
    "SectionNumbering",
    "assign_item_ordinals",
    "build_numbering",
    "number_sections",
    "paginate",
    "split_record",
    "collect_gallery",
    "insert_fixed_pages",
]
