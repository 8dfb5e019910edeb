from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    APP_NAME: str = "Paycycle Backend"
    ENV: str = "dev"

    # 기본 SQLite 파일 DB
    # apps/backend/db.sqlite3를 절대경로로 지정하여 CWD에 따른 경로 문제 방지
    _default_db_path = Path(__file__).resolve().parents[2] / "db.sqlite3"
    DATABASE_URL: str = f"sqlite:///{_default_db_path}"

    CORS_ORIGINS: list[str] = ["*"]
    TIMEZONE: str = "Asia/Seoul"

    # 사용자 설정이 비어 있을 때 사용하는 기본값
    DEFAULT_SALARY_DAY: int = 25
    DEFAULT_LOCALE: str = "ko-KR"
    DEFAULT_CURRENCY: str = "KRW"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="PAYCYCLE_", case_sensitive=False)


settings = Settings()
