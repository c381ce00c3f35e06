"""
HTTP client for the product search service.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import requests

from prisbanditt.config import SearchSettings
from prisbanditt.crawling.logging_utils import log_event

logger = logging.getLogger(__name__)


class SearchIndexError(Exception):
    """Raised when the search service rejects or cannot serve a request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class ImportResult:
    succeeded: int
    failed: int
    errors: list[str] = field(default_factory=list)


class SearchClient:
    """
    Thin wrapper over the search service REST API.
    """

    def __init__(
        self,
        *,
        settings: SearchSettings,
        session: requests.Session | None = None,
        admin: bool = False,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()
        api_key = settings.admin_api_key if admin and settings.admin_api_key else settings.api_key
        self._headers = {"X-TYPESENSE-API-KEY": api_key}

    @property
    def collection(self) -> str:
        return self._settings.collection

    def health(self) -> bool:
        return bool(self._request("GET", "/health").json().get("ok"))

    def collection_exists(self, name: str) -> bool:
        try:
            self._request("GET", f"/collections/{name}")
        except SearchIndexError as exc:
            if exc.status_code == 404:
                return False
            raise
        return True

    def ensure_collection(self, schema: Mapping[str, Any]) -> bool:
        """
        Create the collection if missing. Returns True when it was created.
        """

        name = str(schema["name"])
        if self.collection_exists(name):
            log_event(logger, logging.INFO, "search_collection_exists", collection=name)
            return False

        self._request("POST", "/collections", json=dict(schema))
        log_event(logger, logging.INFO, "search_collection_created", collection=name)
        return True

    def import_documents(
        self,
        documents: Sequence[Mapping[str, Any]],
        *,
        action: str = "upsert",
    ) -> ImportResult:
        if not documents:
            return ImportResult(succeeded=0, failed=0)

        body = "\n".join(json.dumps(document, default=str) for document in documents)
        response = self._request(
            "POST",
            f"/collections/{self.collection}/documents/import",
            params={"action": action},
            data=body.encode("utf-8"),
            headers={"Content-Type": "text/plain"},
        )

        succeeded = 0
        errors: list[str] = []
        for line in response.text.splitlines():
            if not line.strip():
                continue
            try:
                outcome = json.loads(line)
            except json.JSONDecodeError:
                errors.append(line)
                continue
            if outcome.get("success"):
                succeeded += 1
            else:
                errors.append(str(outcome.get("error", line)))

        log_event(
            logger,
            logging.INFO,
            "search_documents_imported",
            collection=self.collection,
            succeeded=succeeded,
            failed=len(errors),
        )
        return ImportResult(succeeded=succeeded, failed=len(errors), errors=errors)

    def search(self, parameters: Mapping[str, Any]) -> dict[str, Any]:
        return self._request(
            "GET",
            f"/collections/{self.collection}/documents/search",
            params=dict(parameters),
        ).json()

    def close(self) -> None:
        self._session.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> requests.Response:
        url = f"{self._settings.base_url}{path}"
        try:
            response = self._session.request(
                method,
                url,
                headers={**self._headers, **(headers or {})},
                timeout=self._settings.timeout_seconds,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise SearchIndexError(f"Search request failed method={method} path={path}: {exc}") from exc

        if response.status_code >= 400:
            raise SearchIndexError(
                f"Search service returned status={response.status_code} "
                f"method={method} path={path}: {response.text[:300]}",
                status_code=response.status_code,
            )
        return response
