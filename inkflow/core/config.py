from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./inkflow.db"
    sql_echo: bool = False

    jwt_secret: str = "dev-change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    # HTTP-сервер
    port: int = 3001
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    # Клиент: адрес API и задержки автосохранения
    api_base_url: str = "http://localhost:3001/api"
    autosave_delay_ms: int = 1000
    completion_delay_ms: int = 1000

    # Генеративный ассистент (пустой ключ отключает backend)
    gemini_api_key: str = ""
    fast_model: str = "gemini-2.5-flash"
    pro_model: str = "gemini-2.5-pro"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
