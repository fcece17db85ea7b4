# alerte_meteo/config.py
# ------------------------------------------------------------
# Central configuration using pydantic-settings.
#
# All values can be overridden via environment variables
# (or a local .env file), e.g. ADMIN_USER, JWT_SECRET, REDIS_URL.
# ------------------------------------------------------------

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal


class Settings(BaseSettings):
    """
    Runtime configuration for the alert service and the sync client.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --------------------------------------------------------
    # Environment / logging
    # --------------------------------------------------------
    environment: Literal["development", "production"] = "development"
    log_level: str = "INFO"

    # --------------------------------------------------------
    # HTTP server
    # --------------------------------------------------------
    host: str = "0.0.0.0"
    port: int = 3000

    # --------------------------------------------------------
    # Storage
    # --------------------------------------------------------
    store_backend: Literal["redis", "file"] = "redis"
    redis_url: str = "redis://localhost:6379/0"
    alert_key: str = "alert:current"
    alert_file_path: str = "alert.json"

    # --------------------------------------------------------
    # Admin session (single shared identity)
    # --------------------------------------------------------
    admin_user: str = ""
    admin_pass: str = ""
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    session_cookie_name: str = "krimo_token"
    session_ttl_days: int = 7
    cookie_secure: bool = True   # deployed behind HTTPS

    # --------------------------------------------------------
    # CORS / Frontend integration
    # --------------------------------------------------------
    api_cors_origins: str = (
        "http://localhost:5173,"
        "http://localhost:3000"
    )
    static_dir: str = ""          # empty -> no static mount
    wilayas_path: str = ""        # empty -> bundled dataset

    # --------------------------------------------------------
    # Sync client (public display)
    # --------------------------------------------------------
    api_base_url: str = "http://localhost:3000"
    poll_interval_sec: float = 30.0
    request_timeout_sec: float = 8.0
    cold_start_delays_sec: str = "2,5,10"

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------
    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def cors_list(self) -> List[str]:
        """
        Parse comma-separated CORS origins into a clean list.
        """
        return [
            x.strip()
            for x in self.api_cors_origins.split(",")
            if x.strip()
        ]

    def cold_start_delays(self) -> List[float]:
        """
        Parse the comma-separated retry schedule used right after startup.
        Invalid or negative entries are skipped.
        """
        out: List[float] = []
        for x in self.cold_start_delays_sec.split(","):
            try:
                v = float(x.strip())
            except ValueError:
                continue
            if v >= 0:
                out.append(v)
        return out


# Singleton settings object
settings = Settings()
