"""
Object Store

Path-addressed blob storage with public URLs. Services depend on
ObjectStoreProtocol; GCSObjectStore stores objects in a Google Cloud
Storage bucket.
"""

import asyncio
import logging
from typing import Dict, Optional, Protocol, runtime_checkable

from google.cloud import storage

logger = logging.getLogger(__name__)

PUBLIC_URL_BASE = "https://storage.googleapis.com"


@runtime_checkable
class ObjectStoreProtocol(Protocol):
    """Interface for blob storage"""

    async def put_object(
        self,
        path: str,
        data: bytes,
        content_type: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> str:
        """Store bytes at path and return the public URL"""
        ...

    def get_public_url(self, path: str) -> str:
        ...


class GCSObjectStore:
    """Google Cloud Storage backed object store"""

    def __init__(self, bucket_name: str, project: Optional[str] = None, client: Optional[storage.Client] = None):
        self.bucket_name = bucket_name
        self._client = client or storage.Client(project=project)
        self._bucket = self._client.bucket(bucket_name)

    def _upload(self, path: str, data: bytes, content_type: str, metadata: Optional[Dict[str, str]]) -> None:
        blob = self._bucket.blob(path)
        if metadata:
            blob.metadata = metadata
        blob.upload_from_string(data, content_type=content_type)
        blob.make_public()

    async def put_object(
        self,
        path: str,
        data: bytes,
        content_type: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> str:
        # The storage client is blocking; keep it off the event loop
        await asyncio.to_thread(self._upload, path, data, content_type, metadata)
        url = self.get_public_url(path)
        logger.info(f"Uploaded {len(data)} bytes to gs://{self.bucket_name}/{path}")
        return url

    def get_public_url(self, path: str) -> str:
        return f"{PUBLIC_URL_BASE}/{self.bucket_name}/{path}"
