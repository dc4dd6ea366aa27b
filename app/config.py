from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Optional at startup; an unset secret makes every webhook fail verification
    SHOPIFY_WEBHOOK_SECRET: SecretStr | None = None

    APP_BASE_URL: str = "http://localhost:8000"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def webhook_secret_bytes(self) -> bytes | None:
        if self.SHOPIFY_WEBHOOK_SECRET is None:
            return None
        raw = self.SHOPIFY_WEBHOOK_SECRET.get_secret_value()
        if not raw.strip():
            return None
        return raw.encode("utf-8")

settings = Settings()
