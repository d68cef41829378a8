"""Data types for loaded and parsed content files."""

import datetime
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


class FrontMatterFormat(str, Enum):
    """Encoding of a front-matter block, identified by its fence."""

    YAML = "yaml"
    TOML = "toml"


FENCES = {
    FrontMatterFormat.YAML: "---",
    FrontMatterFormat.TOML: "+++",
}


# front-matter key -> Document field
RECOGNIZED_KEYS: Dict[str, str] = {
    "title": "title",
    "date": "date",
    "author": "authors",
    "authors": "authors",
    "tags": "tags",
    "tocDepth": "toc_depth",
    "toc_depth": "toc_depth",
    "hidden": "hidden",
    "anchorLinks": "anchor_links",
    "anchor_links": "anchor_links",
    "resources": "resources",
}


@dataclass(frozen=True)
class RawDocument:
    path: str
    text: str
    source: Optional[Path] = None


@dataclass(frozen=True)
class Violation:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


def _as_sequence(value: Any) -> Any:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return value


def _as_date(value: Any) -> Any:
    # datetime is a subclass of date, so test it first
    if value is None or type(value) is datetime.date:
        return value
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.datetime.fromisoformat(text).date()
        except ValueError:
            raise ValueError(f"not a valid calendar date: {value!r}") from None
    raise ValueError(f"expected a date, got {type(value).__name__}")


def freeze(value: Any) -> Any:
    """Read-only copy of decoded front-matter: mappings become proxies, lists tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of :func:`freeze`, for serialisation."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


class Resource(BaseModel):
    """A named reference to an auxiliary file of a post, usually an image."""

    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    name: str = ""
    src: str
    title: str = ""
    params: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("name", "title", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("params")
    @classmethod
    def _freeze_params(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return freeze(value)

    @field_serializer("params")
    def _thaw_params(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return thaw(value)


class Document(BaseModel):
    """
    Parsed representation of one content file.

    Recognised front-matter keys become typed fields. Anything else is kept
    in ``extra`` so that new theme flags pass through untouched.
    """

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    path: str
    title: str = ""
    date: Optional[datetime.date] = None
    authors: Tuple[str, ...] = Field(
        default=(), validation_alias=AliasChoices("authors", "author")
    )
    tags: Tuple[str, ...] = ()
    toc_depth: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("toc_depth", "tocDepth")
    )
    hidden: bool = False
    anchor_links: bool = Field(
        default=False, validation_alias=AliasChoices("anchor_links", "anchorLinks")
    )
    resources: Tuple[Resource, ...] = ()
    body: str = ""
    extra: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    format: FrontMatterFormat = FrontMatterFormat.YAML
    source: Optional[Path] = Field(default=None, exclude=True)

    @field_validator("title", mode="before")
    @classmethod
    def _null_title(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        return _as_date(value)

    @field_validator("authors", "tags", mode="before")
    @classmethod
    def _coerce_sequence(cls, value: Any) -> Any:
        return _as_sequence(value)

    @field_validator("tags")
    @classmethod
    def _collapse_tags(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(value))

    @field_validator("toc_depth", mode="before")
    @classmethod
    def _reject_bool_depth(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("expected an integer, got a boolean")
        return value

    @field_validator("hidden", "anchor_links", mode="before")
    @classmethod
    def _null_flag(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("resources", mode="before")
    @classmethod
    def _null_resources(cls, value: Any) -> Any:
        return () if value is None else value

    @field_validator("extra")
    @classmethod
    def _freeze_extra(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return freeze(value)

    @field_serializer("extra")
    def _thaw_extra(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return thaw(value)

    def is_set(self, key: str) -> bool:
        """Whether front-matter ``key`` was given a non-empty value.

        Recognised keys are looked up on their typed field, anything else
        in ``extra``.
        """
        field = RECOGNIZED_KEYS.get(key)
        if field is None:
            value = self.extra.get(key)
        elif field in self.model_fields_set:
            value = getattr(self, field)
        else:
            return False
        return not (value is None or value == "" or value == ())

    def resource(self, name: str) -> Optional[Resource]:
        """Look up a resource by the name the body refers to it with."""
        for item in self.resources:
            if item.name == name:
                return item
        return None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible form handed to the renderer."""
        return self.model_dump(mode="json")
