"""
Feed loader: reads the raw player feed from a file or URL
"""

import asyncio
import zipfile
from io import BytesIO
from pathlib import Path
from typing import Optional

import httpx

from core.config import settings
from core.exceptions import FeedReadError
import logging

logger = logging.getLogger(__name__)

ZIP_MAGIC = b"PK\x03\x04"


class FeedLoader:
    """
    Load the complete feed content into memory.

    Supports:
    - Local XML files
    - http(s) URLs (e.g. https://ratings.fide.com/download/players_list_xml.zip)
    - Zip archives wrapping the XML export, from either location

    Either the full content is returned or FeedReadError is raised.
    """

    def __init__(self, source: str, timeout: Optional[float] = None):
        self.source = str(source)
        self.timeout = timeout if timeout is not None else settings.FEED_TIMEOUT

    @property
    def is_remote(self) -> bool:
        return self.source.lower().startswith(("http://", "https://"))

    async def load(self) -> bytes:
        """Return the raw XML bytes of the feed"""
        if self.is_remote:
            content = await self._download()
        else:
            content = await self._read_file()

        if content.startswith(ZIP_MAGIC):
            content = self._unzip(content)

        logger.info(f"Loaded {len(content)} bytes from {self.source}")
        return content

    async def _read_file(self) -> bytes:
        path = Path(self.source)
        logger.info(f"Reading feed from {path}")
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise FeedReadError(
                "Cannot read feed file",
                context={"source": self.source},
                original_exception=e
            )

    async def _download(self) -> bytes:
        logger.info(f"Downloading feed from {self.source}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(self.source)
                response.raise_for_status()
                return response.content
        except httpx.HTTPStatusError as e:
            raise FeedReadError(
                "Feed download returned an error status",
                context={"source": self.source, "status_code": e.response.status_code},
                original_exception=e
            )
        except httpx.HTTPError as e:
            raise FeedReadError(
                "Feed download failed",
                context={"source": self.source},
                original_exception=e
            )

    def _unzip(self, archive: bytes) -> bytes:
        """Extract the XML member of a zipped feed"""
        try:
            with zipfile.ZipFile(BytesIO(archive), "r") as zf:
                names = zf.namelist()
                xml_name = next((n for n in names if n.lower().endswith(".xml")), None)
                if xml_name is None:
                    raise FeedReadError(
                        "Feed archive contains no XML file",
                        context={"source": self.source, "members": names}
                    )
                logger.info(f"Extracting {xml_name} from archive")
                return zf.read(xml_name)
        except zipfile.BadZipFile as e:
            raise FeedReadError(
                "Feed archive is corrupt",
                context={"source": self.source},
                original_exception=e
            )
