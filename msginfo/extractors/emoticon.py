"""Emoticon extractor — parenthesised word tokens of one fixed length."""

from __future__ import annotations

import re
from typing import Optional

from msginfo.extractors.base import BaseExtractor
from msginfo.models import Emoticon

EMOTICON_PATTERN = re.compile(r"\((\w+)\)", re.ASCII)


class EmoticonExtractor(BaseExtractor):
    """Keeps a ``(token)`` only when ``len(token)`` equals *length* exactly.

    Tokens are ASCII word characters only, so the length is also the byte
    length; ``(ééééééééééééééé)`` never matches.

    ``(thisisaoneemoti)`` passes with the default of 15, ``(thisisgolang)``
    does not. Shorter tokens are rejected too.
    """

    name = "emoticons"
    pattern = EMOTICON_PATTERN

    def __init__(self, length: int = 15) -> None:
        self.length = length

    async def process(self, match: re.Match[str]) -> Optional[Emoticon]:
        token = match.group(1)
        if len(token) != self.length:
            return None
        return Emoticon(token=token)
