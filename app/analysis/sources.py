from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable

from app.schemas.cv import Source


def _field(record: Any, name: str) -> Any:
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _clean(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def extract_sources(chunks: Iterable[Any] | None) -> list[Source]:
    """Turn engine grounding chunks into ``Source`` items.

    Chunks may be plain dicts (decoded JSON) or SDK objects; a chunk without a
    ``web`` record carrying both a title and a URI is skipped. Input order is kept.
    """
    sources: list[Source] = []
    for chunk in chunks or ():
        web = _field(chunk, "web")
        title = _clean(_field(web, "title"))
        uri = _clean(_field(web, "uri"))
        if title and uri:
            sources.append(Source(title=title, uri=uri))
    return sources
