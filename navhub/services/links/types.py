from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

UNNAMED_TITLE = "未命名"


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class LinkItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    name_en: str = ""
    desc: str = ""
    desc_en: str = ""
    url: str = ""
    target: str = "_blank"
    icon: str | None = None
    tags: str | tuple[str, ...] = ""

    @field_validator("name", "name_en", "desc", "desc_en", "url", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> str:
        return _text(value)

    @field_validator("target", mode="before")
    @classmethod
    def _default_target(cls, value: Any) -> str:
        return _text(value) or "_blank"

    @field_validator("icon", mode="before")
    @classmethod
    def _blank_icon(cls, value: Any) -> str | None:
        return _text(value) or None

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, list):
            return tuple(_text(v) for v in value)
        return value

    @property
    def identity_key(self) -> str:
        """url, else name, else name_en; first non-empty after trimming.

        Links without url and names all share the empty key.
        """
        for candidate in (self.url, self.name, self.name_en):
            key = candidate.strip()
            if key:
                return key
        return ""

    @property
    def tag_list(self) -> list[str]:
        if isinstance(self.tags, tuple):
            return [t for t in self.tags if t]
        return [self.tags] if self.tags else []


class LinkGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    title_en: str = ""
    links: tuple[LinkItem, ...] = ()

    @field_validator("title", "title_en", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> str:
        return _text(value)

    @field_validator("links", mode="before")
    @classmethod
    def _none_to_empty_links(cls, value: Any) -> Any:
        return () if value is None else value

    @property
    def merge_key(self) -> str:
        return self.title or UNNAMED_TITLE


class LinkDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    groups: tuple[LinkGroup, ...] = ()

    @field_validator("groups", mode="before")
    @classmethod
    def _none_to_empty_groups(cls, value: Any) -> Any:
        return () if value is None else value
