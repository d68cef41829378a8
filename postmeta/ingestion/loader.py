"""Discovery and reading of content files under a root directory."""

import fnmatch
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence, Tuple, Union

import aiofiles

from postmeta.exceptions import DocumentReadError, NotFoundError
from postmeta.ingestion.types import RawDocument
from postmeta.utils import get_logger

logger = get_logger(__name__)

DEFAULT_EXTENSIONS: Tuple[str, ...] = (".md", ".markdown")


class DocumentLoader:
    """Enumerates content files below ``root`` and reads them.

    Iterating a loader yields :class:`RawDocument` objects in a stable order.
    Each iteration walks the directory again, so a loader can be reused.
    """

    def __init__(
        self,
        root: Union[str, Path],
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        recursive: bool = True,
        exclude: Sequence[str] = (),
        prefix: Optional[str] = None,
    ):
        """
        Initialize the loader.

        Args:
            root: Content root directory.
            extensions: File extensions that mark a document.
            recursive: Whether to descend into subdirectories.
            exclude: Glob patterns matched against the relative path and the
                file name.
            prefix: Prepended to every identifier, so documents from several
                roots stay distinct.
        """
        self.root = Path(root)
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.recursive = recursive
        self.exclude = tuple(exclude)
        self.prefix = prefix.strip("/") if prefix else None

    def with_prefix(self, prefix: str) -> "DocumentLoader":
        """A copy of this loader whose identifiers start with ``prefix``."""
        return DocumentLoader(
            self.root,
            extensions=self.extensions,
            recursive=self.recursive,
            exclude=self.exclude,
            prefix=prefix,
        )

    def __iter__(self) -> Iterator[RawDocument]:
        for path in self.discover():
            yield self.read(path)

    def discover(self) -> Iterator[Path]:
        """Return a lazy iterator over the content files below the root.

        Raises:
            NotFoundError: If the root does not exist or is not a directory.
                Raised on the call itself, not on first iteration.
        """
        if not self.root.exists():
            raise NotFoundError(
                f"Content root not found: {self.root}", root=str(self.root)
            )
        if not self.root.is_dir():
            raise NotFoundError(
                f"Content root is not a directory: {self.root}", root=str(self.root)
            )
        return self._walk()

    def _walk(self) -> Iterator[Path]:
        pattern = "**/*" if self.recursive else "*"
        candidates = sorted(
            (p for p in self.root.glob(pattern) if p.is_file()),
            key=lambda p: p.relative_to(self.root).as_posix(),
        )
        for path in candidates:
            if self.accepts(path):
                yield path
            else:
                logger.debug("skipping_file", path=str(path))

    def accepts(self, path: Path) -> bool:
        """Whether ``path`` is a document this loader should yield."""
        relative = path.relative_to(self.root)
        if any(part.startswith(".") for part in relative.parts):
            return False
        if path.suffix.lower() not in self.extensions:
            return False
        rel = relative.as_posix()
        for pattern in self.exclude:
            if fnmatch.fnmatch(rel, pattern) or fnmatch.fnmatch(path.name, pattern):
                return False
        return True

    def identifier(self, path: Path) -> str:
        """Document identifier: posix path below the root, behind ``prefix``."""
        relative = path.relative_to(self.root).as_posix()
        return f"{self.prefix}/{relative}" if self.prefix else relative

    def read(self, path: Path) -> RawDocument:
        """Read one content file.

        Raises:
            DocumentReadError: If the file cannot be read or is not UTF-8.
        """
        ident = self.identifier(path)
        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(f"Cannot read file: {e}", path=ident) from e
        return RawDocument(path=ident, text=text, source=path.resolve())

    async def aread(self, path: Path) -> RawDocument:
        """Async counterpart of :meth:`read`."""
        ident = self.identifier(path)
        try:
            async with aiofiles.open(path, mode="r", encoding="utf-8-sig") as f:
                text = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(f"Cannot read file: {e}", path=ident) from e
        return RawDocument(path=ident, text=text, source=path.resolve())
