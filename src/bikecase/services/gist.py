"""GitHub Gist client for bikecase.

A thin wrapper over httpx that checks the expected status code of every call
and turns transport failures into RemoteTransportError. No request is retried.
"""

import logging
from pathlib import PurePosixPath
from types import TracebackType
from typing import Any

import httpx
from pydantic import ValidationError

from ..constants import GITHUB_API_URL, HTTP_TIMEOUT, RUST_EXTENSIONS, USER_AGENT
from ..errors import (
    RemoteContentAmbiguousError,
    RemoteContentMissingError,
    RemoteContentTruncatedError,
    RemoteError,
    RemoteStatusError,
    RemoteTransportError,
)
from ..models import CreatedGist, Gist, GistFile, RemoteRecord

logger = logging.getLogger(__name__)


def select_rust_file(gist: Gist) -> GistFile:
    """Pick the only Rust file of a gist.

    Raises:
        RemoteContentMissingError: If the gist has no Rust file
        RemoteContentAmbiguousError: If it has more than one
        RemoteContentTruncatedError: If the file content was truncated
    """
    candidates = [
        f for f in gist.files.values() if PurePosixPath(f.filename).suffix in RUST_EXTENSIONS
    ]
    if not candidates:
        raise RemoteContentMissingError(f"no Rust files found in gist {gist.id}")
    if len(candidates) > 1:
        names = ", ".join(f.filename for f in candidates)
        raise RemoteContentAmbiguousError(f"multiple Rust files in gist {gist.id}: [{names}]")

    file = candidates[0]
    if file.truncated:
        raise RemoteContentTruncatedError(f"{file.filename} is truncated")
    return file


class GistClient:
    """Client for the GitHub Gist REST API."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = GITHUB_API_URL,
        transport: httpx.BaseTransport | None = None,
        timeout: float = HTTP_TIMEOUT,
    ):
        headers = {"User-Agent": USER_AGENT, "Accept": "application/vnd.github+json"}
        if token:
            headers["Authorization"] = f"token {token}"
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "GistClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(
        self,
        method: str,
        path: str,
        expected: int,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        url = self._client.base_url.join(path)
        logger.info(f"{method} {url}")
        try:
            response = self._client.request(method, path, json=payload)
        except httpx.HTTPError as e:
            raise RemoteTransportError(f"{method} {url} failed") from e

        logger.info(f"{response.status_code} {response.reason_phrase}")
        if response.status_code != expected:
            raise RemoteStatusError(method, str(url), expected, response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(f"{method} {url}: response is not valid JSON") from e

    def retrieve(self, gist_id: str) -> RemoteRecord:
        """Fetch a gist and its single Rust file."""
        data = self._request("GET", f"gists/{gist_id}", 200)
        try:
            gist = Gist.model_validate(data)
        except ValidationError as e:
            raise RemoteError(f"unexpected response for gist {gist_id}") from e

        file = select_rust_file(gist)
        return RemoteRecord(
            gist_id=gist_id,
            filename=file.filename,
            content=file.content,
            description=gist.description or "",
        )

    def update(self, gist_id: str, filename: str, content: str, description: str) -> None:
        """Overwrite one file and the description of an existing gist."""
        payload = {
            "description": description,
            "files": {filename: {"content": content}},
        }
        self._request("PATCH", f"gists/{gist_id}", 200, payload)
        logger.info(f"Updated `{gist_id}`")

    def create(self, filename: str, content: str, description: str, public: bool) -> str:
        """Create a gist holding one file and return its id."""
        payload = {
            "files": {filename: {"content": content}},
            "description": description,
            "public": public,
        }
        data = self._request("POST", "gists", 201, payload)
        try:
            gist_id = CreatedGist.model_validate(data).id
        except ValidationError as e:
            raise RemoteError("unexpected response for a created gist") from e
        logger.info(f"Created `{gist_id}`")
        return gist_id
