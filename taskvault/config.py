from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./taskvault.db"
    AUTO_CREATE_SCHEMA: bool = True

    # credential policy
    MIN_SECRET_LENGTH: int = 4
    MAX_OWNER_SCAN: int = 1000
    RESOLVE_TIMEOUT_SECONDS: float = 10.0

    # argon2id cost, tuned for sub-second interactive verification
    ARGON2_TIME_COST: int = 2
    ARGON2_MEMORY_COST: int = 102400
    ARGON2_PARALLELISM: int = 8
    ARGON2_HASH_LEN: int = 32

    CREDENTIAL_CACHE_PATH: Path = Path.home() / ".taskvault" / "auth.json"

    LOG_LEVEL: str = "INFO"
    APP_NAME: str = "taskvault"
    APP_VERSION: str = "2.0.0"
    ENV: str = "dev"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
