"""
Batch processing of a content tree.

Every content file goes through loader -> parser -> validator on its own.
A broken post is recorded on its :class:`DocumentResult` and the batch
carries on with the next one.
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from postmeta.exceptions import DocumentError, ValidationError
from postmeta.ingestion import (
    Document,
    DocumentLoader,
    DocumentValidator,
    FrontMatterParser,
    RawDocument,
)
from postmeta.utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DocumentResult:
    path: str
    document: Optional[Document] = None
    error: Optional[DocumentError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"path": self.path, "ok": self.ok}
        if self.error is not None:
            data["error"] = {
                "type": type(self.error).__name__,
                "message": self.error.reason,
            }
            violations = getattr(self.error, "violations", None)
            if violations:
                data["error"]["violations"] = [
                    {"field": v.field, "message": v.message} for v in violations
                ]
        return data


@dataclass
class PipelineReport:
    roots: List[Path]
    results: List[DocumentResult] = field(default_factory=list)

    @property
    def documents(self) -> List[Document]:
        """Validated documents, in discovery order."""
        return [r.document for r in self.results if r.ok and r.document is not None]

    @property
    def failures(self) -> List[DocumentResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> Dict[str, int]:
        failed = len(self.failures)
        return {
            "total": len(self.results),
            "valid": len(self.results) - failed,
            "failed": failed,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "roots": [str(root) for root in self.roots],
            "summary": self.summary(),
            "results": [result.to_dict() for result in self.results],
        }


def _qualified(loaders: Tuple[DocumentLoader, ...]) -> Tuple[DocumentLoader, ...]:
    """Give every unprefixed loader of a multi-root batch its root as prefix.

    The root's directory name is used when those are distinct, the full
    root path otherwise.
    """
    if len(loaders) < 2:
        return loaders
    roots = [loader.root.resolve() for loader in loaders]
    names = [root.name for root in roots]
    if all(names) and len(set(names)) == len(names):
        labels = names
    else:
        labels = [root.as_posix() for root in roots]
    return tuple(
        loader if loader.prefix else loader.with_prefix(label)
        for loader, label in zip(loaders, labels)
    )


class DocumentPipeline:
    """Runs loader, parser and validator over one or more content roots."""

    def __init__(
        self,
        loader: Union[DocumentLoader, Sequence[DocumentLoader]],
        parser: Optional[FrontMatterParser] = None,
        validator: Optional[DocumentValidator] = None,
        concurrency: int = 8,
    ):
        """
        Initialize the pipeline.

        Args:
            loader: Loader for a single root, or several loaders whose
                documents form one collection. Several loaders get their
                root as identifier prefix unless they carry one already.
            parser: Front-matter parser. Defaults to one accepting every fence format.
            validator: Document validator. Defaults to the built-in invariants.
            concurrency: Maximum number of files handled at once by :meth:`arun`.
        """
        if isinstance(loader, DocumentLoader):
            self.loaders: Tuple[DocumentLoader, ...] = (loader,)
        else:
            self.loaders = _qualified(tuple(loader))
        self.parser = parser or FrontMatterParser()
        self.validator = validator or DocumentValidator()
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self.concurrency = concurrency

    def process(self, raw: RawDocument) -> Document:
        """Parse and validate one loaded file.

        Raises:
            MalformedMetadataError: If the front-matter block is broken.
            TypeMismatchError: If a field has a value of the wrong shape.
            ValidationError: If the document violates an invariant.
        """
        return self.validator.validate(self.parser.parse(raw))

    def _listings(self) -> List[Tuple[DocumentLoader, Iterator[Path]]]:
        # discover() checks every root up front, so a missing root fails
        # before any document is processed
        return [(loader, loader.discover()) for loader in self.loaders]

    def iter_results(self) -> Iterator[DocumentResult]:
        """Lazily process every content file, one result per file.

        Collection-wide checks need the whole batch and are applied by
        :meth:`run` only.

        Raises:
            NotFoundError: If a content root does not exist.
        """
        listings = self._listings()
        return (
            self._handle(loader, path) for loader, paths in listings for path in paths
        )

    def _handle(self, loader: DocumentLoader, path: Path) -> DocumentResult:
        ident = loader.identifier(path)
        try:
            document = self.process(loader.read(path))
        except DocumentError as e:
            return self._failed(ident, e)
        return self._accepted(document)

    def run(self) -> PipelineReport:
        """Process every content file and apply collection checks."""
        return self._report(list(self.iter_results()))

    async def arun(self) -> PipelineReport:
        """Concurrent counterpart of :meth:`run`; results keep discovery order."""
        sources = [
            (loader, path) for loader, paths in self._listings() for path in paths
        ]
        semaphore = asyncio.Semaphore(self.concurrency)

        async def handle(loader: DocumentLoader, path: Path) -> DocumentResult:
            async with semaphore:
                ident = loader.identifier(path)
                try:
                    raw = await loader.aread(path)
                    document = self.process(raw)
                except DocumentError as e:
                    return self._failed(ident, e)
                return self._accepted(document)

        results = await asyncio.gather(
            *(handle(loader, path) for loader, path in sources)
        )
        return self._report(list(results))

    def documents(self) -> Iterator[Document]:
        """Validated documents only; the hand-off to a renderer."""
        return iter(self.run().documents)

    def _accepted(self, document: Document) -> DocumentResult:
        logger.debug("document_accepted", path=document.path)
        return DocumentResult(path=document.path, document=document)

    def _failed(self, path: str, error: DocumentError) -> DocumentResult:
        logger.warning(
            "document_rejected",
            path=path,
            error_type=type(error).__name__,
            error=error.reason,
        )
        return DocumentResult(path=path, error=error)

    def _report(self, results: List[DocumentResult]) -> PipelineReport:
        clashes = self.validator.collection_violations(
            r.document for r in results if r.document is not None
        )
        if clashes:
            results = [
                self._failed(r.path, ValidationError(clashes[r.path], path=r.path))
                if r.ok and r.path in clashes
                else r
                for r in results
            ]

        report = PipelineReport(
            roots=[loader.root for loader in self.loaders], results=results
        )
        logger.info("pipeline_complete", **report.summary())
        return report
