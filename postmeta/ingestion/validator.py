"""Invariant checks for parsed documents."""

from collections import Counter, defaultdict
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Sequence

from postmeta.exceptions import ValidationError
from postmeta.ingestion.types import RECOGNIZED_KEYS, Document, Violation

MAX_TOC_DEPTH = 6


def _duplicates(values: Iterable[str]) -> List[str]:
    counts = Counter(values)
    return [value for value, count in counts.items() if count > 1]


def _resource_exists(directory: Path, src: PurePosixPath) -> bool:
    # src may be a glob matching several files
    pattern = src.as_posix()
    if any(char in pattern for char in "*?["):
        return any(path.is_file() for path in directory.glob(pattern))
    return directory.joinpath(*src.parts).is_file()


class DocumentValidator:
    """Checks a :class:`Document` against the content invariants.

    The validator never stops at the first problem: every violation is
    collected so a post can be fixed in one pass. It has no side effects.
    """

    def __init__(
        self,
        required: Sequence[str] = (),
        max_toc_depth: int = MAX_TOC_DEPTH,
        check_resource_files: bool = False,
    ):
        """Initialize the validator.

        Args:
            required: Extra front-matter keys every post must define, on top
                of ``title`` and ``date``.
            max_toc_depth: Largest accepted ``tocDepth``.
            check_resource_files: Whether resource files must exist next to
                the source file.
        """
        self.required = tuple(required)
        self.max_toc_depth = max_toc_depth
        self.check_resource_files = check_resource_files

    def validate(self, document: Document) -> Document:
        """Return ``document`` unchanged if it is valid.

        Raises:
            ValidationError: Listing every violated invariant.
        """
        violations = self.violations(document)
        if violations:
            raise ValidationError(violations, path=document.path)
        return document

    def is_valid(self, document: Document) -> bool:
        return not self.violations(document)

    def violations(self, document: Document) -> List[Violation]:
        found: List[Violation] = []

        if not document.title or not document.title.strip():
            found.append(Violation("title", "title is missing or empty"))
        if document.date is None:
            found.append(Violation("date", "date is missing"))

        if any(not author.strip() for author in document.authors):
            found.append(Violation("authors", "author names must not be empty"))

        if any(not tag.strip() for tag in document.tags):
            found.append(Violation("tags", "tags must not be empty"))
        repeated = _duplicates(document.tags)
        if repeated:
            found.append(
                Violation("tags", f"duplicate tags: {', '.join(sorted(repeated))}")
            )

        if document.toc_depth is not None and not (
            1 <= document.toc_depth <= self.max_toc_depth
        ):
            found.append(
                Violation(
                    "toc_depth",
                    f"tocDepth must be between 1 and {self.max_toc_depth}, "
                    f"got {document.toc_depth}",
                )
            )

        found.extend(self._resource_violations(document))

        for key in self.required:
            if RECOGNIZED_KEYS.get(key) in ("title", "date"):
                continue
            if not document.is_set(key):
                found.append(Violation(key, f"required key '{key}' is missing"))

        return found

    def _resource_violations(self, document: Document) -> List[Violation]:
        found: List[Violation] = []
        names = [resource.name for resource in document.resources]

        if any(not name.strip() for name in names):
            found.append(Violation("resources", "every resource needs a name"))
        repeated = _duplicates(name for name in names if name.strip())
        if repeated:
            found.append(
                Violation(
                    "resources",
                    f"duplicate resource names: {', '.join(sorted(repeated))}",
                )
            )

        for resource in document.resources:
            label = resource.name or resource.src
            src = PurePosixPath(resource.src.replace("\\", "/"))
            if not resource.src.strip():
                found.append(
                    Violation("resources", f"resource '{label}' has an empty src")
                )
            elif src.is_absolute() or ".." in src.parts or ":" in resource.src:
                found.append(
                    Violation(
                        "resources",
                        f"resource '{label}' src must be a relative path "
                        f"inside the post directory, got '{resource.src}'",
                    )
                )
            elif not src.parts:
                found.append(
                    Violation(
                        "resources",
                        f"resource '{label}' src must name a file, got '{resource.src}'",
                    )
                )
            elif self.check_resource_files and document.source is not None:
                if not _resource_exists(document.source.parent, src):
                    found.append(
                        Violation(
                            "resources",
                            f"resource '{label}' file not found: {resource.src}",
                        )
                    )

        return found

    def collection_violations(
        self, documents: Iterable[Document]
    ) -> Dict[str, List[Violation]]:
        """Check invariants that span several documents.

        Returns:
            Violations keyed by document path; empty when the batch is
            consistent.
        """
        by_path: Dict[str, int] = defaultdict(int)
        for document in documents:
            by_path[document.path] += 1
        return {
            path: [Violation("path", f"path is used by {count} documents")]
            for path, count in by_path.items()
            if count > 1
        }
