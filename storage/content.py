"""Post content pools, one sheet per channel"""

import logging
import random
from typing import List, Optional

from errors import EmptyContentPool
from settings import CONTENT_HEADER_MODE
from .backends import Rows, TabularBackend

logger = logging.getLogger(__name__)

HEADER_MODES = ("auto", "always", "never")

# First-cell values treated as a header row in "auto" mode
HEADER_KEYWORDS = frozenset({
    "post_content", "content", "tweet", "tweets", "post", "posts", "text", "messages",
})

SAMPLE_POSTS = [
    "Hello! Giving it my best again today 💪",
    "Programming is fun! #coding",
    "Good work today, everyone! It was a great day ✨",
    "Learning something new is wonderful 📚",
    "Hope you all have a great day 🌟",
    "OAuth 2.0 sign-in for X is up and running! #XAPI",
    "Building an automatic posting system from a spreadsheet #automation",
    "Type hints make this so much nicer to work on ⚡",
]


def _normalize(cell: str) -> str:
    return cell.strip().lower().replace(" ", "_")


class ContentStore:
    """Selectable post texts per channel"""

    def __init__(
        self,
        backend: TabularBackend,
        header_mode: str = CONTENT_HEADER_MODE,
        rng: Optional[random.Random] = None,
    ):
        if header_mode not in HEADER_MODES:
            raise ValueError(f"header_mode must be one of {HEADER_MODES}, got {header_mode!r}")
        self.backend = backend
        self.header_mode = header_mode
        self.rng = rng or random.Random()

    def _has_header(self, rows: Rows) -> bool:
        if self.header_mode == "always":
            return True
        if self.header_mode == "never" or not rows or not rows[0]:
            return False
        return _normalize(str(rows[0][0])) in HEADER_KEYWORDS

    def _provision(self, channel: str) -> Rows:
        rows = [["post_content"]] + [[post] for post in SAMPLE_POSTS]
        self.backend.create_sheet(channel, rows)
        logger.info(f"Created sheet '{channel}' with {len(SAMPLE_POSTS)} sample posts")
        return rows

    def list_content(self, channel: str) -> List[str]:
        """Return the non-blank, trimmed texts of ``channel`` in sheet order

        A missing channel sheet is created with sample posts.
        """
        rows = self.backend.read_rows(channel)
        if rows is None:
            rows = self._provision(channel)

        if self._has_header(rows):
            logger.debug(f"Sheet '{channel}' has a header row")
            rows = rows[1:]

        contents = []
        for row in rows:
            text = str(row[0]).strip() if row else ""
            if text:
                contents.append(text)

        if not contents:
            logger.warning(f"No post content found in sheet '{channel}' (empty or whitespace-only cells)")
        else:
            logger.debug(f"Loaded {len(contents)} posts from sheet '{channel}'")
        return contents

    def pick_random(self, channel: str) -> str:
        """Uniformly pick one text of ``channel``

        Raises:
            EmptyContentPool: If the channel has no usable content
        """
        contents = self.list_content(channel)
        if not contents:
            raise EmptyContentPool(channel)
        index = self.rng.randrange(len(contents))
        logger.info(f"Picked post {index + 1}/{len(contents)} from sheet '{channel}'")
        return contents[index]
