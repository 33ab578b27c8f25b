"""Probe a site for well-known AI discovery files (llms.txt and friends)."""

import logging
from dataclasses import dataclass

import httpx

from llmscore.config import Settings
from llmscore.services.content_classifier import (
    DEFAULT_CLASSIFIER,
    MAX_AI_FILE_LENGTH,
    ContentClassifier,
)

logger = logging.getLogger(__name__)


@dataclass
class FileCheck:
    """Outcome of probing one path."""
    path: str
    exists: bool
    content: str | None = None
    error: str | None = None
    status_code: int | None = None
    content_type: str | None = None

    def to_dict(self) -> dict:
        data: dict = {"path": self.path, "exists": self.exists}
        if self.content is not None:
            data["content"] = self.content
        if self.error is not None:
            data["error"] = self.error
        if self.status_code is not None:
            data["statusCode"] = self.status_code
        if self.content_type is not None:
            data["contentType"] = self.content_type
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "FileCheck":
        return cls(
            path=data.get("path", ""),
            exists=bool(data.get("exists")),
            content=data.get("content"),
            error=data.get("error"),
            status_code=data.get("statusCode"),
            content_type=data.get("contentType"),
        )


class AIFileProber:
    """Checks each configured path on an origin, one request per path."""

    def __init__(
        self,
        settings: Settings,
        classifier: ContentClassifier = DEFAULT_CLASSIFIER,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.paths = list(settings.ai_file_paths)
        self.timeout = settings.probe_timeout_seconds
        self.user_agent = settings.probe_user_agent
        self.classifier = classifier
        self.transport = transport

    async def probe(self, origin: str, paths: list[str] | None = None) -> list[FileCheck]:
        """Probe every path against `origin`, preserving path order.

        Args:
            origin: Scheme and host, e.g. ``https://example.com``
            paths: Override the configured candidate paths

        Returns:
            One FileCheck per path, in the same order
        """
        candidates = paths if paths is not None else self.paths
        origin = origin.rstrip("/")
        logger.info(f"Probing {len(candidates)} AI files on {origin}")

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={
                "User-Agent": self.user_agent,
                "Accept": "text/plain, text/*, */*",
            },
            transport=self.transport,
        ) as client:
            checks = []
            for path in candidates:
                checks.append(await self._probe_path(client, origin, path))

        found = sum(1 for check in checks if check.exists)
        logger.info(f"AI file probe of {origin} complete: {found}/{len(checks)} found")
        return checks

    async def _probe_path(self, client: httpx.AsyncClient, origin: str, path: str) -> FileCheck:
        file_url = f"{origin}{path}"
        try:
            async with client.stream("GET", file_url) as response:
                return await self._classify(response, path)
        except httpx.HTTPError as e:
            logger.warning(f"Network error probing {file_url}: {e}")
            return FileCheck(path=path, exists=False, error="Network error", status_code=0)

    async def _classify(self, response: httpx.Response, path: str) -> FileCheck:
        content_type = response.headers.get("content-type", "")
        check = FileCheck(
            path=path,
            exists=False,
            status_code=response.status_code,
            content_type=content_type,
        )

        if response.is_success:
            try:
                content = await _read_text(response, MAX_AI_FILE_LENGTH)
            except (UnicodeDecodeError, LookupError):
                check.error = "Could not read content"
                return check

            if self.classifier.is_legitimate_text_file(content, content_type):
                check.exists = True
                check.content = content
            else:
                check.error = "File appears to be a generated error page or invalid content"

        elif response.status_code == 404:
            try:
                content = await _read_text(response, MAX_AI_FILE_LENGTH)
            except (UnicodeDecodeError, LookupError):
                check.error = "File not found (404)"
                return check

            if self.classifier.is_legitimate_404(content, content_type):
                check.error = "File not found (404)"
            elif self.classifier.is_probably_error_page(content):
                check.error = "File not found - website error page"
            else:
                check.error = "File not found (unexpected 404 response)"

        elif response.status_code >= 400:
            check.error = f"Server error ({response.status_code})"

        else:
            check.error = f"Unexpected response ({response.status_code})"

        return check


async def _read_text(response: httpx.Response, limit: int) -> str:
    """Decode the body, stopping once more than `limit` characters arrived."""
    chunks = []
    size = 0
    async for chunk in response.aiter_text():
        chunks.append(chunk)
        size += len(chunk)
        if size > limit:
            break
    return "".join(chunks)
