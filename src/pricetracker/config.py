from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "pricetracker"
    database_url_override: str = ""  # e.g. sqlite+aiosqlite:///./prices.db for local runs
    port: int = 4000
    api_key: str = ""  # shared secret for mutating endpoints; empty locks them
    coingecko_base_url: str = "https://api.coingecko.com"
    coingecko_api_key: str = ""
    http_timeout: float = 10.0
    debug: bool = False
    log_level: str = "INFO"

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    class Config:
        env_file = ".env"


settings = Settings()
