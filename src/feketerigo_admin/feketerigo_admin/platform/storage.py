from __future__ import annotations

import logging
from datetime import datetime, timedelta
from pathlib import Path, PurePosixPath
from typing import Optional, Protocol

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..core.constants import DEFAULT_SIGNED_URL_TTL
from ..core.exceptions import StorageError

logger = logging.getLogger("feketerigo_admin.platform.storage")


def storage_path(bucket: str, filename: str, now: datetime) -> str:
    """`{bucket}/{YYYY-MM}/{epoch_ms}.{ext}`; ext from the original name, `bin` when none."""

    suffix = PurePosixPath(filename or "").suffix.lstrip(".").lower()
    ext = suffix or "bin"
    stamp = int(now.timestamp() * 1000)
    return f"{bucket}/{now.strftime('%Y-%m')}/{stamp}.{ext}"


class FileStorage(Protocol):
    def upload(self, bucket: str, filename: str, data: bytes, *, now: Optional[datetime] = None) -> str:
        raise NotImplementedError

    def download(self, path: str) -> bytes:
        raise NotImplementedError

    def remove(self, path: str) -> None:
        raise NotImplementedError

    def create_signed_url(self, path: str, ttl: Optional[int] = None) -> str:
        raise NotImplementedError


class LocalFileStorage(FileStorage):
    """Bucketed file storage on local disk with signed, expiring download links."""

    def __init__(
        self,
        root: str | Path,
        secret_key: str,
        *,
        url_prefix: str = "/files",
        default_ttl: int = DEFAULT_SIGNED_URL_TTL,
    ):
        self._root = Path(root).resolve()
        self._serializer = URLSafeTimedSerializer(secret_key, salt="feketerigo-files")
        self._url_prefix = url_prefix.rstrip("/")
        self._default_ttl = int(default_ttl)

    def _resolve(self, path: str) -> Path:
        target = (self._root / path).resolve()
        if target != self._root and self._root not in target.parents:
            raise StorageError(f"Érvénytelen fájlútvonal: {path}")
        return target

    def upload(self, bucket: str, filename: str, data: bytes, *, now: Optional[datetime] = None) -> str:
        stamp = now or datetime.now()
        path = storage_path(bucket, filename, stamp)
        target = self._resolve(path)
        # same bucket and millisecond: move to the next free stamp
        while target.exists():
            stamp += timedelta(milliseconds=1)
            path = storage_path(bucket, filename, stamp)
            target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "xb") as fh:
                fh.write(data)
        except OSError as e:
            logger.error("Upload of %s to %s failed: %s", filename, path, e)
            raise StorageError(f"Fájl feltöltése sikertelen: {filename}") from e
        logger.info("Stored %s (%d bytes) as %s", filename, len(data), path)
        return path

    def download(self, path: str) -> bytes:
        target = self._resolve(path)
        if not target.is_file():
            raise StorageError(f"A fájl nem található: {path}")
        return target.read_bytes()

    def remove(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink()
        except FileNotFoundError as e:
            raise StorageError(f"A fájl nem található: {path}") from e
        except OSError as e:
            logger.error("Removing %s failed: %s", path, e)
            raise StorageError(f"Fájl törlése sikertelen: {path}") from e

    def create_signed_url(self, path: str, ttl: Optional[int] = None) -> str:
        self._resolve(path)
        token = self._serializer.dumps({"path": path, "ttl": int(ttl or self._default_ttl)})
        return f"{self._url_prefix}/{token}"

    def resolve_signed(self, token: str, max_age: Optional[int] = None) -> str:
        """Return the storage path behind a signed token, or raise StorageError."""

        try:
            payload = self._serializer.loads(token, max_age=max_age or self._max_ttl(token))
        except SignatureExpired as e:
            raise StorageError("A letöltési link lejárt") from e
        except BadSignature as e:
            raise StorageError("Érvénytelen letöltési link") from e
        path = str(payload.get("path", ""))
        self._resolve(path)
        return path

    def _max_ttl(self, token: str) -> int:
        # The ttl travels inside the signed payload; read it without trusting age yet.
        try:
            payload = self._serializer.loads(token)
        except BadSignature:
            return self._default_ttl
        return int(payload.get("ttl") or self._default_ttl)
