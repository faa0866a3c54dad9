from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="LOREBOOK_")

    app_name: str = "Lorebook"
    debug: bool = False

    api_base_url: str = "https://lorcana.brybry.fr/api"

    # Bounded request duration; exceeding it surfaces as NetworkUnreachable
    request_timeout: float = 10.0

    # Wire shape for wishlist calls. "legacy" is the pre-/wishlist/add API
    wire_version: Literal["current", "legacy"] = "current"


settings = Settings()


# =============================================================================
# LIST LOADING RETRY
# =============================================================================

# Extra attempts after the first failure when a list screen asks for retry
LIST_RETRY_ATTEMPTS = 2

# Seconds to wait before each retry
LIST_RETRY_DELAY = 5.0
