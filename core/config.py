"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


# Names of the settings a run cannot start without, in validation order
REQUIRED_SETTINGS = (
    "MongoDBAtlasConnectionString",
    "DatabaseName",
    "CollectionName",
    "AzureBlobStorageConnectionString",
    "BlobContainerName",
)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Source (MongoDB)
    MongoDBAtlasConnectionString: Optional[str] = None
    DatabaseName: Optional[str] = None
    CollectionName: Optional[str] = None
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    MONGO_CONNECT_TIMEOUT_MS: int = 10000

    # Sink (Azure Blob Storage)
    AzureBlobStorageConnectionString: Optional[str] = None
    BlobContainerName: Optional[str] = None
    EXPORT_BLOB_PREFIX: str = "data-export"
    EXPORT_CONTENT_TYPE: str = "text/csv"

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Export Configuration
    MAX_RETRIES: int = 3
    RETRY_DELAY_MS: int = 1000
    EXPORT_INTERVAL_MINUTES: int = 60
    EXPORT_SCHEDULE: str = "0 0 * * * *"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    def missing_required(self) -> List[str]:
        """Names of required settings that are unset, empty or blank"""
        missing = []
        for name in REQUIRED_SETTINGS:
            value = getattr(self, name)
            if value is None or not str(value).strip():
                missing.append(name)
        return missing


def get_settings() -> Settings:
    """Resolve settings from the current environment (fresh on every call)"""
    return Settings()
