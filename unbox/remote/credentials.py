from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from dataclasses import dataclass
from typing import Any

from unbox.config import PROJECT_ID_KEY, STORAGE_DIR, STORAGE_FILE, TOKEN_KEY
from unbox.errors import CredentialStorageError, MalformedCredential

log = logging.getLogger(__name__)

REQUIRED_FIELDS = ("project_id", "private_key", "client_email")


@dataclass(frozen=True)
class ServiceAccount:
    project_id: str
    client_email: str
    private_key: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServiceAccount":
        missing = [name for name in REQUIRED_FIELDS if not str(data.get(name) or "").strip()]
        if missing:
            raise MalformedCredential(f"service account is missing {', '.join(missing)}")
        return cls(
            project_id=str(data["project_id"]).strip(),
            client_email=str(data["client_email"]).strip(),
            private_key=str(data["private_key"]),
        )


def decode_token(token: str) -> ServiceAccount:
    """Decode a base64-wrapped service-account JSON blob."""
    token = (token or "").strip()
    if not token:
        raise MalformedCredential("empty token")
    try:
        raw = base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedCredential(f"invalid base64: {exc}") from exc
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise MalformedCredential(f"invalid JSON in token: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedCredential("token does not hold a JSON object")
    return ServiceAccount.from_dict(data)


def encode_token(data: dict[str, Any]) -> str:
    return base64.b64encode(json.dumps(data).encode("utf-8")).decode("ascii")


class CredentialStore:
    """Small persisted key/value file holding the login token."""

    def __init__(self, folder: str | None = None) -> None:
        self.folder = folder or os.path.join(os.path.expanduser("~"), STORAGE_DIR)
        try:
            os.makedirs(self.folder, exist_ok=True)
        except OSError as exc:
            log.warning("cannot create storage folder %s: %s", self.folder, exc)
        self.path = os.path.join(self.folder, STORAGE_FILE)

    def _load(self) -> dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            log.warning("ignoring unreadable storage file %s: %s", self.path, exc)
            return {}
        if isinstance(data, dict):
            return {str(k): str(v) for k, v in data.items()}
        return {}

    def _save(self, data: dict[str, str]) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as exc:
            raise CredentialStorageError(f"cannot write {self.path}: {exc}") from exc

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def login(self, token: str) -> ServiceAccount:
        """Validate and persist a token.

        Raises MalformedCredential, or CredentialStorageError when the file
        cannot be written.
        """
        account = decode_token(token)
        data = self._load()
        data[TOKEN_KEY] = token.strip()
        data[PROJECT_ID_KEY] = account.project_id
        self._save(data)
        log.info("logged in to project %s", account.project_id)
        return account

    def logout(self) -> None:
        data = self._load()
        removed = [data.pop(key, None) for key in (TOKEN_KEY, PROJECT_ID_KEY)]
        if not any(removed):
            return
        try:
            self._save(data)
        except CredentialStorageError as exc:
            log.warning("logout could not clear stored credentials: %s", exc)

    def credentials(self) -> ServiceAccount | None:
        """The stored account, or None when missing or undecodable."""
        token = self.get(TOKEN_KEY)
        if not token:
            return None
        try:
            return decode_token(token)
        except MalformedCredential as exc:
            log.warning("stored credentials are unusable: %s", exc)
            return None
