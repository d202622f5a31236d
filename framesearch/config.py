from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Google Custom Search (required at request time)
    google_custom_search_api_key: str = ""
    google_custom_search_cx_id: str = ""
    google_search_url: str = "https://www.googleapis.com/customsearch/v1"
    upstream_timeout_seconds: float = 15.0

    # Paging policy
    filtered_target_count: int = 30
    filtered_max_fetches: int = 5
    unfiltered_target_count: int = 10
    unfiltered_max_fetches: int = 1

    # Probing
    probe_concurrency_cap: int = 20
    probe_timeout_seconds: float = 3.5
    probe_user_agent: str = "ResearchSearchBot/1.0"
    non_embeddable_domains: str = (
        "facebook.com,twitter.com,instagram.com,linkedin.com,youtube.com,"
        "netflix.com,amazon.com,ebay.com,reddit.com"
    )

    # Output
    result_cap: int = 10

    # App
    cors_origins: str = "http://localhost:3000"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_dir: str = "logs"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",")]

    @property
    def non_embeddable_domain_list(self) -> list[str]:
        return [d.strip().lower() for d in self.non_embeddable_domains.split(",") if d.strip()]

    def has_search_credentials(self) -> bool:
        return bool(self.google_custom_search_api_key and self.google_custom_search_cx_id)


settings = Settings()
