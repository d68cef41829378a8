"""
Front-matter parsing.

A content file starts with a fenced metadata block followed by the body::

    ---
    title: Example Post
    date: 2020-12-04
    ---
    Hello world.

``---`` fences hold YAML, ``+++`` fences hold TOML. The block is decoded
into a mapping and coerced into a :class:`Document`.
"""

import tomllib
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from postmeta.exceptions import MalformedMetadataError, TypeMismatchError
from postmeta.ingestion.types import (
    FENCES,
    RECOGNIZED_KEYS,
    Document,
    FrontMatterFormat,
    RawDocument,
)
from postmeta.utils import get_logger

logger = get_logger(__name__)

# string fields whose YAML scalars keep their literal spelling
LITERAL_KEYS = ("title", "author", "authors", "tags")

_NON_STRING_TAGS = frozenset(
    f"tag:yaml.org,2002:{name}" for name in ("int", "float", "bool")
)


def split_front_matter(
    text: str,
    formats: Iterable[FrontMatterFormat] = tuple(FrontMatterFormat),
    path: Optional[str] = None,
) -> Tuple[FrontMatterFormat, str, str]:
    """
    Split raw file text into its metadata block and body.

    Args:
        text: Raw file contents.
        formats: Fence formats to recognise.
        path: Document identifier, used in error messages.

    Returns:
        Tuple of (format, metadata block, body).

    Raises:
        MalformedMetadataError: If there is no opening fence or the opening
            fence is never closed.
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").lstrip("\ufeff").split("\n")

    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start == len(lines):
        raise MalformedMetadataError("Empty file, no front-matter found", path=path)

    opening = lines[start].rstrip()
    fmt = next((f for f in formats if FENCES[f] == opening), None)
    if fmt is None:
        raise MalformedMetadataError(
            "Missing front-matter: file does not start with a fence marker", path=path
        )

    fence = FENCES[fmt]
    for end in range(start + 1, len(lines)):
        if lines[end].rstrip() == fence:
            block = "\n".join(lines[start + 1 : end])
            body = "\n".join(lines[end + 1 :]).strip("\n")
            return fmt, block, body

    raise MalformedMetadataError(
        f"Unbalanced front-matter: closing '{fence}' fence not found", path=path
    )


def decode_block(
    fmt: FrontMatterFormat, block: str, path: Optional[str] = None
) -> Dict[str, Any]:
    """
    Decode a metadata block into a mapping.

    Raises:
        MalformedMetadataError: If the block is not valid YAML/TOML or does
            not decode to a mapping.
    """
    try:
        if fmt is FrontMatterFormat.TOML:
            data: Any = tomllib.loads(block)
        else:
            data = yaml.safe_load(block)
    except (yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        raise MalformedMetadataError(
            f"Invalid {fmt.value.upper()} front-matter: {e}", path=path
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MalformedMetadataError(
            f"Front-matter must be a mapping, got {type(data).__name__}", path=path
        )
    if fmt is FrontMatterFormat.YAML:
        _keep_literal_scalars(block, data)
    return {str(key): value for key, value in data.items()}


def _literal(node: yaml.Node, value: Any) -> Any:
    if isinstance(node, yaml.ScalarNode) and node.tag in _NON_STRING_TAGS:
        return node.value
    return value


def _keep_literal_scalars(block: str, data: Dict[Any, Any]) -> None:
    """Replace resolved numbers and booleans in text fields with their source text.

    ``tags: [net, 1.10]`` must give the tag ``1.10``, not ``1.1``.
    """
    root = yaml.compose(block, Loader=yaml.SafeLoader)
    if not isinstance(root, yaml.MappingNode):
        return
    for key_node, value_node in root.value:
        key = key_node.value
        if key not in LITERAL_KEYS or key not in data:
            continue
        if isinstance(value_node, yaml.SequenceNode):
            items = data[key]
            if isinstance(items, list) and len(items) == len(value_node.value):
                data[key] = [
                    _literal(node, item) for node, item in zip(value_node.value, items)
                ]
        else:
            data[key] = _literal(value_node, data[key])


class FrontMatterParser:
    """Turns raw file text into :class:`Document` records."""

    def __init__(
        self,
        formats: Iterable[Union[str, FrontMatterFormat]] = tuple(FrontMatterFormat),
    ):
        self.formats = tuple(FrontMatterFormat(f) for f in formats)

    def parse(
        self, raw: Union[RawDocument, str], path: Optional[str] = None
    ) -> Document:
        """
        Parse one content file.

        Args:
            raw: A loaded file, or bare text.
            path: Identifier to use when ``raw`` is bare text.

        Returns:
            The parsed document. Invariants are not checked here; that is
            the validator's job.

        Raises:
            MalformedMetadataError: If the fences or the block are broken.
            TypeMismatchError: If a recognised key has a value of the wrong shape.
        """
        if isinstance(raw, RawDocument):
            text, path, source = raw.text, raw.path, raw.source
        else:
            text, source = raw, None
        path = path or "<string>"

        fmt, block, body = split_front_matter(text, self.formats, path=path)
        metadata = decode_block(fmt, block, path=path)

        fields = {key: value for key, value in metadata.items() if key in RECOGNIZED_KEYS}
        extra = {key: value for key, value in metadata.items() if key not in RECOGNIZED_KEYS}
        if extra:
            logger.debug("unrecognized_keys", path=path, keys=sorted(extra))

        spellings: Dict[str, List[str]] = {}
        for key in fields:
            spellings.setdefault(RECOGNIZED_KEYS[key], []).append(key)
        for field, keys in spellings.items():
            if len(keys) > 1:
                raise TypeMismatchError(
                    f"set by more than one key: {', '.join(keys)}",
                    field=field,
                    value={key: fields[key] for key in keys},
                    path=path,
                )

        try:
            return Document.model_validate(
                {
                    **fields,
                    "path": path,
                    "body": body,
                    "extra": extra,
                    "format": fmt,
                    "source": source,
                }
            )
        except PydanticValidationError as e:
            raise self._mismatch(e, metadata, path) from e

    @staticmethod
    def _mismatch(
        error: PydanticValidationError, metadata: Dict[str, Any], path: str
    ) -> TypeMismatchError:
        first = error.errors()[0]
        loc = first.get("loc") or ("<unknown>",)
        key = str(loc[0])
        where = ".".join(str(part) for part in loc)
        message = first.get("msg", "invalid value")
        if len(error.errors()) > 1:
            message = f"{message} (and {len(error.errors()) - 1} more)"
        return TypeMismatchError(
            message, field=where, value=metadata.get(key), path=path
        )
