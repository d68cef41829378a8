"""
Configuration models for postmeta.

This module defines Pydantic models for configuration validation.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Union

from pydantic import BaseModel, Field, field_validator

from postmeta.ingestion import (
    DEFAULT_EXTENSIONS,
    DocumentLoader,
    DocumentValidator,
    FrontMatterFormat,
    FrontMatterParser,
)
from postmeta.ingestion.validator import MAX_TOC_DEPTH
from postmeta.pipeline import DocumentPipeline


class ContentConfig(BaseModel):
    """Where content files live and which of them are documents."""

    root: str = Field(default="content")
    extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    recursive: bool = True
    exclude: List[str] = Field(default_factory=list)

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: List[str]) -> List[str]:
        """Normalise extensions to lower case with a leading dot."""
        if not v:
            raise ValueError("At least one extension is required")
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]


class ParserConfig(BaseModel):
    """Which front-matter fences are accepted."""

    formats: List[FrontMatterFormat] = Field(
        default_factory=lambda: list(FrontMatterFormat)
    )

    @field_validator("formats")
    @classmethod
    def validate_formats(cls, v: List[FrontMatterFormat]) -> List[FrontMatterFormat]:
        if not v:
            raise ValueError("At least one front-matter format is required")
        return v


class ValidationConfig(BaseModel):
    """Extra invariants on top of the built-in ones."""

    required: List[str] = Field(default_factory=list)
    max_toc_depth: int = Field(default=MAX_TOC_DEPTH, ge=1)
    check_resource_files: bool = False


class PipelineConfig(BaseModel):
    concurrency: int = Field(default=8, ge=1)


class LoggingConfig(BaseModel):
    """Pydantic model for logging configuration."""

    level: str = Field(default="INFO")
    structured: bool = True

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that the log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()


class MainConfig(BaseModel):
    """Pydantic model for the main configuration file."""

    content: ContentConfig = Field(default_factory=ContentConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def build_loader(self, root: Optional[Union[str, Path]] = None) -> DocumentLoader:
        return DocumentLoader(
            root if root is not None else self.content.root,
            extensions=self.content.extensions,
            recursive=self.content.recursive,
            exclude=self.content.exclude,
        )

    def build_pipeline(
        self, roots: Optional[Sequence[Union[str, Path]]] = None
    ) -> DocumentPipeline:
        """
        Wire loader, parser and validator from this configuration.

        Args:
            roots: Content roots to use instead of ``content.root``.

        Returns:
            A ready-to-run pipeline.
        """
        loaders = [self.build_loader(root) for root in roots] if roots else [
            self.build_loader()
        ]
        return DocumentPipeline(
            loaders,
            parser=FrontMatterParser(formats=self.parser.formats),
            validator=DocumentValidator(
                required=self.validation.required,
                max_toc_depth=self.validation.max_toc_depth,
                check_resource_files=self.validation.check_resource_files,
            ),
            concurrency=self.pipeline.concurrency,
        )
