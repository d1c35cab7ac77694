from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    # Redirect plain-HTTP requests (judged by X-Forwarded-Proto) to HTTPS.
    # Only useful behind a TLS-terminating proxy (Heroku, Fly.io, ...)
    force_https: bool = False

    # GitHub
    github_api_url: str = "https://api.github.com"
    github_token: str = ""  # Personal access token, sent as Bearer on every request
    stargazers_per_page: int = 100  # GitHub max
    max_concurrent_page_fetches: int = 5
    max_stargazer_pages: int = 400  # GitHub refuses stargazer pages past 400 (HTTP 422)

    # Fonts - missing files fall back to matplotlib's monospace family
    font_regular_path: str = "fonts/JetBrainsMono-Regular.ttf"
    font_bold_path: str = "fonts/JetBrainsMono-Bold.ttf"

    # Charts
    default_color: str = "violet"

    # Response cache
    cache_ttl_seconds: int = 86400  # 24 hours
    cache_check_period_seconds: int = 600  # Sweep expired entries every 10 minutes
    cache_max_entries: int = 1024

    # Scheduler (cache sweeping). Disable for tests / one-off runs.
    scheduler_enabled: bool = True

    @property
    def github_auth_enabled(self) -> bool:
        """Check if a GitHub token is configured."""
        return bool(self.github_token)


settings = Settings()
