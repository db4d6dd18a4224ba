from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Commit Stats"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    ENV: str = "dev"  # Environment: "dev", "staging", "prod"

    # CORS
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    # GitHub
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_USER_AGENT: str = "GitHub-Stats-App"
    GITHUB_REQUEST_TIMEOUT_SECONDS: float = 30.0
    GITHUB_HTTP_RETRIES: int = 0  # Transport-level connect retries only

    # ==========================================================================
    # Pipeline Limits
    # ==========================================================================

    # --- Pagination ---
    GITHUB_PAGE_SIZE: int = 100  # Items requested per API page
    GITHUB_MAX_PAGES: int = 10  # Hard cap on pages per resource

    # --- Request validation ---
    MAX_DATE_RANGE_DAYS: int = 365  # Widest window a caller may request

    # --- Aggregation ---
    TOP_LANGUAGES_LIMIT: int = 10  # Languages kept in summary.topLanguages

    @property
    def is_production(self) -> bool:
        return self.ENV.lower() == "prod"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
