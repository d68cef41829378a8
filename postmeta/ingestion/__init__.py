"""
Ingestion module for postmeta.

Loader -> parser -> validator, one content file at a time.
"""

from postmeta.ingestion.frontmatter import (
    FrontMatterParser,
    decode_block,
    split_front_matter,
)
from postmeta.ingestion.loader import DEFAULT_EXTENSIONS, DocumentLoader
from postmeta.ingestion.types import (
    RECOGNIZED_KEYS,
    Document,
    FrontMatterFormat,
    RawDocument,
    Resource,
    Violation,
)
from postmeta.ingestion.validator import DocumentValidator

__all__ = [
    "DEFAULT_EXTENSIONS",
    "Document",
    "DocumentLoader",
    "DocumentValidator",
    "FrontMatterFormat",
    "FrontMatterParser",
    "RECOGNIZED_KEYS",
    "RawDocument",
    "Resource",
    "Violation",
    "decode_block",
    "split_front_matter",
]
