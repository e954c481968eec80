"""
Sources for the POS extract bytes.

SupabaseStorageSource downloads the object from hosted storage (production);
LocalFileSource reads a file on disk (CLI --file runs and local testing).
"""
import logging
from pathlib import Path

from ..config import settings

logger = logging.getLogger(__name__)


class ExtractFetchError(RuntimeError):
    """The extract object could not be fetched."""


class SupabaseStorageSource:
    def __init__(self, url: str, service_key: str, bucket: str, object_key: str):
        self.url = url
        self.service_key = service_key
        self.bucket = bucket
        self.object_key = object_key

    @property
    def name(self) -> str:
        return f"{self.bucket}/{self.object_key}"

    def fetch(self) -> bytes:
        if not self.url or not self.service_key:
            raise ExtractFetchError(
                "Storage credentials not configured. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_KEY environment variables."
            )
        from supabase import create_client

        try:
            client = create_client(self.url, self.service_key)
            content = client.storage.from_(self.bucket).download(self.object_key)
        except Exception as exc:
            raise ExtractFetchError(f"Could not download {self.name}: {exc}") from exc
        if not content:
            raise ExtractFetchError(f"Storage object {self.name} has no body")
        logger.info("Downloaded %s (%d bytes)", self.name, len(content))
        return content


class LocalFileSource:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    @property
    def name(self) -> str:
        return str(self.path)

    def fetch(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as exc:
            raise ExtractFetchError(f"Could not read {self.path}: {exc}") from exc


def default_source() -> SupabaseStorageSource:
    return SupabaseStorageSource(
        url=settings.supabase_url,
        service_key=settings.supabase_service_key,
        bucket=settings.sales_bucket,
        object_key=settings.sales_object_key,
    )
