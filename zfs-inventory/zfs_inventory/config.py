"""
Configuration for ZFS Inventory.

Reads from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_prefix="ZFS_INVENTORY_")

    # ZFS binaries
    zfs_binary: str = "/usr/sbin/zfs"
    zpool_binary: str = "/usr/sbin/zpool"

    # Pool served by the HTTP surface when none is given
    default_pool: str = "tank"

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"


settings = Settings()
