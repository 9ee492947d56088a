"""
Abstract base class for export data sources
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Any


class DataSource(ABC):
    """
    Abstract base class for all data sources.

    Responsibilities:
    - Open and close the connection to the store
    - Hand out the collection handle documents are read from
    - Read every document of that collection in one go
    """

    def __init__(self, source_name: str):
        self.source_name = source_name

    @abstractmethod
    async def connect(self) -> Any:
        """
        Open a connection to the store.

        Returns:
            Live connection handle
        """
        pass

    @abstractmethod
    def get_collection(self, client: Any = None) -> Any:
        """Collection handle on the given (or current) connection"""
        pass

    @abstractmethod
    async def fetch_all(self, collection: Any) -> List[Dict[str, Any]]:
        """
        Fetch every document in the collection.

        Returns:
            Non-empty list of documents
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the connection; never raises"""
        pass

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        pass
