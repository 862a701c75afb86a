import base64
import binascii
import json
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests
from loguru import logger
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from review_store.configs import AppConfig
from review_store.errors import DecodeError, StoreError
from review_store.models import (
    ReviewCollection,
    StoredDocument,
    VersionToken,
    WriteOutcome,
)

CONFLICT_STATUSES = (409, 422)
REQUEST_TIMEOUT = 10


def encode_content(document: Dict[str, Any]) -> str:
    text = json.dumps(document, indent=2, ensure_ascii=False)
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_content(content: str) -> Dict[str, Any]:
    """Decodes a base64 payload (GitHub wraps it in newlines) into a JSON object."""
    try:
        raw = base64.b64decode(content)
        parsed = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError, ValueError) as e:
        raise DecodeError(f"Stored content is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise DecodeError(f"Stored content is a {type(parsed).__name__}, not an object")
    return parsed


def _build_session() -> requests.Session:
    session = requests.Session()
    # Reads only: a replayed PUT could land a write twice
    retry = Retry(
        total=3,
        backoff_factor=0.5,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=frozenset(["GET"]),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class GitHubContentsClient:
    """Versioned blob store backed by a single file in a GitHub repository."""

    def __init__(self, config: AppConfig, session: Optional[requests.Session] = None):
        config.require_store()
        self.owner = config.owner
        self.repo = config.repo
        self.branch = config.branch
        self.api_url = config.api_url
        self.session = session or _build_session()
        self._headers = {
            "Authorization": f"Bearer {config.token.get_secret_value()}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _contents_url(self, path: str) -> str:
        return (
            f"{self.api_url}/repos/{self.owner}/{self.repo}"
            f"/contents/{quote(path, safe='/')}"
        )

    def _blob_url(self, sha: str) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/git/blobs/{sha}"

    def _fetch_blob(self, sha: str) -> str:
        """Blob endpoint for files over the 1MB Contents API limit."""
        response = self.session.get(
            self._blob_url(sha), headers=self._headers, timeout=REQUEST_TIMEOUT
        )
        if not response.ok:
            raise StoreError(
                f"GitHub GET blob {response.status_code} {response.text}",
                status=response.status_code,
            )
        return response.json().get("content") or ""

    def fetch_current(self, path: str, ref: Optional[str] = None) -> StoredDocument:
        response = self.session.get(
            self._contents_url(path),
            headers=self._headers,
            params={"ref": ref or self.branch},
            timeout=REQUEST_TIMEOUT,
        )
        if response.status_code == 404:
            return StoredDocument(exists=False)
        if not response.ok:
            raise StoreError(
                f"GitHub GET {response.status_code} {response.text}",
                status=response.status_code,
            )

        payload = response.json()
        sha = payload["sha"]
        content = payload.get("content") or ""
        if not content and payload.get("encoding") == "none":
            content = self._fetch_blob(sha)

        try:
            document = decode_content(content)
        except DecodeError as e:
            logger.warning(f"Falling back to an empty collection for {path}: {e}")
            document = ReviewCollection.empty().to_document()

        return StoredDocument(
            exists=True, version=VersionToken(sha=sha), document=document
        )

    def conditional_write(
        self,
        path: str,
        document: Dict[str, Any],
        version: Optional[VersionToken],
        message: str,
    ) -> WriteOutcome:
        body = {
            "message": message,
            "content": encode_content(document),
            "branch": self.branch,
        }
        if version is not None:
            body["sha"] = version.sha

        response = self.session.put(
            self._contents_url(path),
            headers=self._headers,
            json=body,
            timeout=REQUEST_TIMEOUT,
        )
        if response.status_code in CONFLICT_STATUSES:
            logger.warning(
                f"Stale version {version} for {path} (status {response.status_code})"
            )
            return WriteOutcome(conflict=True, status=response.status_code)
        if not response.ok:
            raise StoreError(
                f"GitHub PUT {response.status_code} {response.text}",
                status=response.status_code,
            )

        new_sha = response.json()["content"]["sha"]
        logger.info(f"Committed {path} at {new_sha}: {message}")
        return WriteOutcome(version=VersionToken(sha=new_sha), status=response.status_code)
