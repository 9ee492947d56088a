"""
MongoDB data source: connect, read a whole collection, disconnect.

The connect step forces server selection with a ``ping`` so an unreachable
cluster fails inside ``connect()`` (where the runner retries) instead of on
the first read.
"""

from typing import List, Dict, Any, Optional
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError
from exporter.base import DataSource
from core.exceptions import (
    DisconnectError,
    NoDataError,
    SourceConnectionError
)
import logging

logger = logging.getLogger(__name__)


class MongoExtractor(DataSource):
    """
    Extract every document of one MongoDB collection.

    No filter, projection or pagination is applied: the full collection is
    loaded into memory at once.

    Attributes:
        server_selection_timeout_ms: Driver server selection timeout (default: 5000)
        connect_timeout_ms: Driver socket connect timeout (default: 10000)
    """

    def __init__(
        self,
        connection_string: str,
        database_name: str,
        collection_name: str,
        server_selection_timeout_ms: int = 5000,
        connect_timeout_ms: int = 10000
    ):
        super().__init__(source_name=f"{database_name}.{collection_name}")
        self.connection_string = connection_string
        self.database_name = database_name
        self.collection_name = collection_name
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.connect_timeout_ms = connect_timeout_ms
        self.client: Optional[AsyncMongoClient] = None

    @property
    def is_connected(self) -> bool:
        return self.client is not None

    async def connect(self) -> AsyncMongoClient:
        """
        Open a client and wait for a usable server.

        Returns:
            Connected AsyncMongoClient

        Raises:
            pymongo.errors.ServerSelectionTimeoutError: No server within the timeout
            pymongo.errors.ConnectionFailure: Network failure while connecting
        """
        client = AsyncMongoClient(
            self.connection_string,
            serverSelectionTimeoutMS=self.server_selection_timeout_ms,
            connectTimeoutMS=self.connect_timeout_ms
        )

        try:
            await client.admin.command("ping")
        except Exception:
            # A client from a failed attempt is never handed out
            await self._close_client(client)
            raise

        self.client = client
        logger.debug(f"Connected to MongoDB for {self.source_name}")
        return client

    def get_collection(self, client: Optional[AsyncMongoClient] = None):
        """Collection handle for the configured database and collection"""
        client = client or self.client
        if client is None:
            raise SourceConnectionError(
                "Not connected to MongoDB",
                context={
                    "database": self.database_name,
                    "collection": self.collection_name
                }
            )
        return client[self.database_name][self.collection_name]

    async def fetch_all(self, collection) -> List[Dict[str, Any]]:
        """
        Fetch all documents from the collection.

        Returns:
            List of documents, in the order the server returns them

        Raises:
            NoDataError: If the collection is empty
            SourceConnectionError: If the driver fails during the read
        """
        try:
            documents = await collection.find({}).to_list()
        except PyMongoError as e:
            raise SourceConnectionError(
                "Failed to read documents from MongoDB",
                context={
                    "database": self.database_name,
                    "collection": self.collection_name
                },
                original_exception=e
            )

        if len(documents) == 0:
            raise NoDataError(
                "No documents found in MongoDB",
                context={
                    "database": self.database_name,
                    "collection": self.collection_name
                }
            )

        logger.debug(f"Fetched {len(documents)} documents from {self.source_name}")
        return documents

    async def disconnect(self) -> None:
        """Close the client if one is open. Errors are logged, never raised."""
        if self.client is None:
            return

        client, self.client = self.client, None
        if await self._close_client(client):
            logger.info("MongoDB connection closed")

    async def _close_client(self, client: AsyncMongoClient) -> bool:
        try:
            await client.close()
        except Exception as e:
            error = DisconnectError(
                "Error occurred while closing MongoDB connection",
                context={"source_name": self.source_name},
                original_exception=e
            )
            logger.error(
                f"Error occurred while closing MongoDB connection: {str(e)}",
                extra={"error_context": error.to_dict()}
            )
            return False

        return True
