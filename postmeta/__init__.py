"""postmeta - front-matter ingestion for static-site blog posts."""

__version__ = "0.1.0"

from postmeta.ingestion import (
    Document,
    DocumentLoader,
    DocumentValidator,
    FrontMatterFormat,
    FrontMatterParser,
    RawDocument,
    Resource,
    Violation,
)
from postmeta.pipeline import DocumentPipeline, DocumentResult, PipelineReport

__all__ = [
    "Document",
    "DocumentLoader",
    "DocumentPipeline",
    "DocumentResult",
    "DocumentValidator",
    "FrontMatterFormat",
    "FrontMatterParser",
    "PipelineReport",
    "RawDocument",
    "Resource",
    "Violation",
]
