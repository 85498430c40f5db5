from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "feedback-backend"
    environment: str = "local"
    debug: bool = True
    log_level: str = "INFO"

    mongo_scheme: str = "mongodb+srv"
    mongo_port: int = 27017
    mongo_host: str = "localhost"
    mongo_db: str = "feedback_backend"
    mongo_password: str | None = None
    mongo_params: str | None = None
    mongo_user: str | None = None
    mongo_tls: bool = True

    jwt_algorithm: str = "HS256"
    jwt_secret_key: str = "very-secret-key"
    access_token_expires_days: int = 7
    bcrypt_rounds: int = 12

    redis_db: int = 0
    redis_port: int = 6379
    redis_host: str = "localhost"
    redis_password: str | None = None

    feedback_excel_path: str = "feedback.xlsx"
    feedback_timezone: str = "Asia/Kolkata"
    feedback_store_enabled: bool = True
    feedback_requires_auth: bool = False

    cors_origins: list[str] = ["http://localhost:5173"]

    model_config = SettingsConfigDict(env_file=(".env",), case_sensitive=True)

    @property
    def mongo_uri(self) -> str:
        auth = ""
        if self.mongo_user and self.mongo_password:
            auth = f"{self.mongo_user}:{self.mongo_password}@"
        # srv records carry the port themselves
        host = self.mongo_host if self.mongo_scheme == "mongodb+srv" else f"{self.mongo_host}:{self.mongo_port}"
        params = self.mongo_params or "retryWrites=true&w=majority"
        return f"{self.mongo_scheme}://{auth}{host}/{self.mongo_db}?{params}"


settings = Settings()
