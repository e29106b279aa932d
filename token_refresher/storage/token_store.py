from __future__ import annotations

import json
import threading
from contextlib import suppress
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from filelock import FileLock
from pydantic import ValidationError

from token_refresher.config import logger
from token_refresher.errors import TokenStoreError
from token_refresher.models import CredentialRecord


class TokenStore(Protocol):
    def get(self, key: str) -> Optional[Dict[str, Any]]: ...

    def put(self, key: str, value: Dict[str, Any]) -> None: ...


class JsonFileTokenStore:
    """Key/value store persisted as a single JSON document."""

    def __init__(self, file_path: str) -> None:
        self._path = Path(file_path)
        self._lock = threading.RLock()
        self._file_lock = FileLock(str(self._path) + ".lock")

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        return self._read_all().get(key)

    def put(self, key: str, value: Dict[str, Any]) -> None:
        with self._lock:
            with self._file_lock:
                try:
                    data = self._read_all_locked()
                except TokenStoreError:
                    # 已损坏的存储文件被新记录覆盖
                    logger.warning("Overwriting unreadable token store %s", self._path)
                    data = {}
                data[key] = value
                self._write_all_locked(data)

    def _read_all(self) -> Dict[str, Any]:
        with self._lock:
            with self._file_lock:
                return self._read_all_locked()

    def _read_all_locked(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except json.JSONDecodeError as exc:
            logger.error("Invalid JSON in token store %s: %s", self._path, exc)
            raise TokenStoreError("Token store file format error") from exc
        if not isinstance(data, dict):
            logger.error("Token store %s does not hold a JSON object", self._path)
            raise TokenStoreError("Token store file format error")
        return data

    def _write_all_locked(self, data: Dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.parent / (self._path.name + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
            tmp_path.replace(self._path)
        finally:
            with suppress(FileNotFoundError):
                tmp_path.unlink()


def load_record(store: TokenStore, key: str) -> Optional[CredentialRecord]:
    value = store.get(key)
    if value is None:
        return None
    try:
        return CredentialRecord.model_validate(value)
    except ValidationError as exc:
        logger.error("Stored credential record under %s is malformed: %s", key, exc)
        raise TokenStoreError("Stored credential record is malformed") from exc


__all__ = ["JsonFileTokenStore", "TokenStore", "load_record"]
