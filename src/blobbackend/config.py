import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .errors import ConfigurationError


@dataclass(frozen=True)
class AzureBackendConfig:
    storage_account_name: str | None
    storage_access_key: str | None
    container: str | None
    max_size: int | None = None
    account_url: str | None = None


def load_config(env_file: str | None = None) -> AzureBackendConfig:
    """
    Build an AzureBackendConfig from the environment.
    A .env file (or env_file, if given) is loaded first; existing
    environment variables take precedence over it.
    """
    load_dotenv(env_file)

    raw_max_size = os.environ.get("AZURE_MAX_SIZE") or None
    max_size: int | None = None
    if raw_max_size is not None:
        try:
            max_size = int(raw_max_size)
        except ValueError:
            raise ConfigurationError(
                f"AZURE_MAX_SIZE must be an integer, got {raw_max_size!r}"
            )

    return AzureBackendConfig(
        storage_account_name=os.environ.get("AZURE_STORAGE_ACCOUNT"),
        storage_access_key=os.environ.get("AZURE_STORAGE_ACCESS_KEY"),
        container=os.environ.get("AZURE_CONTAINER"),
        max_size=max_size,
        account_url=os.environ.get("AZURE_ACCOUNT_URL") or None,
    )
