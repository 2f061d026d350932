from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from unbox.config import DATABASE_URL_TEMPLATE, REQUEST_TIMEOUT_S
from unbox.errors import RemoteUnavailable
from unbox.remote.credentials import CredentialStore

log = logging.getLogger(__name__)


class DocumentStore(Protocol):
    def get(self, path: str) -> Any | None: ...

    def put(self, path: str, document: Any) -> None: ...


class RemoteDocumentStore:
    """JSON documents addressed by path in a realtime-database project."""

    def __init__(
        self,
        project_id: str,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT_S,
    ) -> None:
        self.project_id = project_id
        self.session = session or requests.Session()
        self.timeout = timeout

    def url_for(self, path: str) -> str:
        return DATABASE_URL_TEMPLATE.format(project_id=self.project_id, path=path.strip("/"))

    def get(self, path: str) -> Any | None:
        url = self.url_for(path)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RemoteUnavailable(path, str(exc)) from exc
        if response.status_code == 401:
            raise RemoteUnavailable(path, "unauthorized (check database rules)")
        if not response.ok:
            raise RemoteUnavailable(path, f"HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteUnavailable(path, f"invalid JSON: {exc}") from exc

    def put(self, path: str, document: Any) -> None:
        url = self.url_for(path)
        try:
            response = self.session.put(url, json=document, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RemoteUnavailable(path, str(exc)) from exc
        if not response.ok:
            raise RemoteUnavailable(path, f"HTTP {response.status_code}")


class OfflineDocumentStore:
    """Stand-in used without credentials: nothing is read or written."""

    def get(self, path: str) -> Any | None:
        log.info("offline: no %s document to load", path)
        return None

    def put(self, path: str, document: Any) -> None:
        _ = document
        log.info("offline: %s not synced", path)


def open_document_store(
    credentials: CredentialStore, session: requests.Session | None = None
) -> DocumentStore:
    account = credentials.credentials()
    if account is None:
        return OfflineDocumentStore()
    return RemoteDocumentStore(account.project_id, session=session)
