from pydantic import BaseModel
import os

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class Settings(BaseModel):
    discovery_provider: str = os.getenv("DISCOVERY_PROVIDER", "simulated")
    google_places_api_key: str = os.getenv("GOOGLE_PLACES_API_KEY", "")
    google_places_region_code: str = os.getenv("GOOGLE_PLACES_REGION_CODE", "")
    api_key: str = os.getenv("PROSPECTFINDER_API_KEY", "")

    analyzer_timeout_s: float = float(os.getenv("ANALYZER_TIMEOUT_S", "10"))
    analyzer_user_agent: str = os.getenv("ANALYZER_USER_AGENT", DEFAULT_USER_AGENT)
    provider_timeout_s: float = float(os.getenv("PROVIDER_TIMEOUT_S", "60"))
    search_deadline_s: float = float(os.getenv("SEARCH_DEADLINE_S", "300"))
    result_delay_s: float = float(os.getenv("RESULT_DELAY_S", "0.1"))
    event_buffer: int = int(os.getenv("EVENT_BUFFER", "16"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
