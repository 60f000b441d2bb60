"""Mention extractor — ``@name`` at the start of the text or after whitespace."""

from __future__ import annotations

import re
from typing import Optional

from msginfo.extractors.base import BaseExtractor
from msginfo.models import Mention

# "kk@man" is not a mention: the @ must open the text or a word
MENTION_PATTERN = re.compile(r"(?:^|\s)@\w+", re.ASCII)


class MentionExtractor(BaseExtractor):
    name = "mentions"
    pattern = MENTION_PATTERN

    async def process(self, match: re.Match[str]) -> Optional[Mention]:
        return Mention(name=self.normalize(match.group()))

    @staticmethod
    def normalize(raw: str) -> str:
        """``" @man"`` → ``"man"``."""
        return raw.lstrip()[1:].strip()
