"""
Load encoded exports into Azure Blob Storage
"""

from typing import Any, Dict, Optional
from azure.core.exceptions import AzureError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient, ContainerClient
from core.exceptions import ContainerNotFoundError, UploadError
import logging

logger = logging.getLogger(__name__)


class BlobLoader:
    """
    Write export payloads into an existing blob container.

    Ensures:
    - The target container is checked before writing and never created
    - Each payload is written as a single blob, overwriting a same-named one
    - Azure SDK failures surface as UploadError

    Use as an async context manager so the service client is closed:

        async with BlobLoader(conn_str, "exports") as loader:
            await loader.ensure_container()
            await loader.write("data-export-....csv", payload)
    """

    def __init__(
        self,
        connection_string: str,
        container_name: str,
        content_type: str = "text/csv"
    ):
        self.connection_string = connection_string
        self.container_name = container_name
        self.content_type = content_type
        self._service: Optional[BlobServiceClient] = None
        self._container: Optional[ContainerClient] = None

    async def __aenter__(self) -> "BlobLoader":
        self._service = BlobServiceClient.from_connection_string(self.connection_string)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._service is not None:
            service, self._service = self._service, None
            self._container = None
            await service.close()

    def get_container_client(self) -> ContainerClient:
        """Cached container client for the target container"""
        if self._service is None:
            self._service = BlobServiceClient.from_connection_string(self.connection_string)
        if self._container is None:
            self._container = self._service.get_container_client(self.container_name)
        return self._container

    async def container_exists(self, container: Optional[ContainerClient] = None) -> bool:
        """
        Check whether the target container exists (read-only).

        Raises:
            UploadError: If the storage service can't be reached
        """
        container = container or self.get_container_client()
        try:
            return await container.exists()
        except AzureError as e:
            raise UploadError(
                f"Failed to check container \"{self.container_name}\"",
                context={
                    "container": self.container_name,
                    "operation": "exists"
                },
                original_exception=e
            )

    async def ensure_container(self, container: Optional[ContainerClient] = None) -> ContainerClient:
        """
        Require the target container to exist.

        Returns:
            Container client for the target container

        Raises:
            ContainerNotFoundError: If the container does not exist
        """
        container = container or self.get_container_client()
        if not await self.container_exists(container):
            raise ContainerNotFoundError(
                f"Container \"{self.container_name}\" does not exist",
                context={"container": self.container_name}
            )
        return container

    async def write(
        self,
        blob_name: str,
        payload: bytes,
        container: Optional[ContainerClient] = None
    ) -> Dict[str, Any]:
        """
        Upload payload as a blob. An existing blob of the same name is overwritten.

        Args:
            blob_name: Name of the blob to write
            payload: Encoded bytes
            container: Container client (defaults to the target container)

        Returns:
            Dict with container, blob_name and size

        Raises:
            UploadError: If the upload fails
        """
        container = container or self.get_container_client()

        logger.debug(f"Writing blob: {self.container_name}/{blob_name} ({len(payload)} bytes)")

        try:
            await container.upload_blob(
                name=blob_name,
                data=payload,
                length=len(payload),
                overwrite=True,
                content_settings=ContentSettings(content_type=self.content_type)
            )
        except AzureError as e:
            raise UploadError(
                f"Failed to upload blob {self.container_name}/{blob_name}",
                context={
                    "container": self.container_name,
                    "blob_name": blob_name,
                    "operation": "upload"
                },
                original_exception=e
            )

        return {
            "container": self.container_name,
            "blob_name": blob_name,
            "size": len(payload)
        }
