"""Result and outcome types passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union


class Category(str, Enum):
    MENTIONS = "mentions"
    EMOTICONS = "emoticons"
    URLS = "urls"


@dataclass(frozen=True)
class Mention:
    """An ``@name`` reference, stored without the ``@``."""
    name: str
    category: ClassVar[Category] = Category.MENTIONS

    def to_json(self) -> str:
        return self.name


@dataclass(frozen=True)
class Emoticon:
    """The inner token of a ``(token)`` match."""
    token: str
    category: ClassVar[Category] = Category.EMOTICONS

    def to_json(self) -> str:
        return self.token


@dataclass(frozen=True)
class UrlInfo:
    """A URL found in the message together with its page title."""
    url: str
    title: str = ""
    category: ClassVar[Category] = Category.URLS

    def to_json(self) -> dict[str, str]:
        return {"url": self.url, "title": self.title}


ExtractedResult = Union[Mention, Emoticon, UrlInfo]

# category value → results in completion order; keys exist only when non-empty
ResultSet = dict[str, list[ExtractedResult]]


def result_set_to_json(data: ResultSet) -> dict[str, list[Any]]:
    """Serialise a ResultSet into plain JSON-compatible structures."""
    return {key: [item.to_json() for item in items] for key, items in data.items()}


# ── outcomes ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Success:
    data: ResultSet = field(default_factory=dict)


@dataclass(frozen=True)
class ClientError:
    reason: str


@dataclass(frozen=True)
class Timeout:
    pass


@dataclass(frozen=True)
class ServerError:
    pass


Outcome = Union[Success, ClientError, Timeout, ServerError]
