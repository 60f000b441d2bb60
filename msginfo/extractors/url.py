"""URL extractor — finds http(s) URLs and resolves each to its page title."""

from __future__ import annotations

import re
from typing import Optional

from msginfo.extractors.base import BaseExtractor
from msginfo.fetcher import UrlFetcher
from msginfo.models import UrlInfo

# Scheme, host/path characters, optional query, then whitespace or end of
# text. Not anchored on the left: "(Zebrahttp://cnn.com" yields the URL.
URL_PATTERN = re.compile(r"http[s]*://\w[\w\-/.]+(?:[?&]+.*)*(?:\s|\Z)", re.ASCII)


class UrlExtractor(BaseExtractor):
    """One fetch per matched URL; fetches run concurrently and a failed one
    just produces no result."""

    name = "urls"
    pattern = URL_PATTERN

    def __init__(self, fetcher: UrlFetcher) -> None:
        self.fetcher = fetcher

    async def process(self, match: re.Match[str]) -> Optional[UrlInfo]:
        url = match.group().strip()
        return await self.fetcher.fetch_title(url)
