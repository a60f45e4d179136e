from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Storage: "memory" for local dev/tests, "redis" for a durable store
    STORE_BACKEND: str = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    STORE_KEY_PREFIX: str = "pv:"

    # JWT: no default, MUST be set in .env
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 30

    # Points rules
    INITIAL_POINTS: int = 1000
    LEDGER_HISTORY_LIMIT: int = 100
    TITLE_MAX_LENGTH: int = 11
    DESCRIPTION_MAX_LENGTH: int = 100
    WITHDRAW_FEE_PERCENT: int = 10
    WITHDRAW_ADDRESS_MIN_LENGTH: int = 20
    # retain | creator | largest_stake
    SETTLEMENT_RESIDUAL_POLICY: str = "retain"

    # App
    APP_NAME: str = "Points Voting"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev


settings = Settings()
