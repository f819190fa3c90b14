"""Per-layout extraction strategies and their registry."""

from .base import ExtractionError, Extractor, ExtractorKind
from .jobs import extract_job_listings
from .registry import (
    ExtractorRegistrationError,
    get_extractor,
    register_extractor,
    registered_extractor_kinds,
)
from .scholarships import extract_accordion, extract_headings, extract_links, extract_table

__all__ = [
    "ExtractionError",
    "Extractor",
    "ExtractorKind",
    "ExtractorRegistrationError",
    "extract_accordion",
    "extract_headings",
    "extract_job_listings",
    "extract_links",
    "extract_table",
    "get_extractor",
    "register_extractor",
    "registered_extractor_kinds",
]
