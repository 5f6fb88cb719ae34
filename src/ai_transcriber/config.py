from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Hosted model credential, checked per request rather than at startup
    api_key: str = ""

    # Gemini REST endpoint
    llm_base_url: str = "https://generativelanguage.googleapis.com"
    llm_model_name: str = "gemini-2.5-flash"
    llm_timeout: float = 300.0

    # Summaries are kept low-variance
    summary_temperature: float = 0.2

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Client side: where the proxy endpoints live
    api_base_url: str = "http://localhost:8000"
    api_timeout: float = 600.0

    @property
    def api_key_configured(self) -> bool:
        return bool(self.api_key.strip())


settings = Settings()
