from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    # ----- APP ENV CONFIG -----
    APP_NAME: str = 'RNG-AUDIT'
    APP_HOST: str = '127.0.0.1'
    APP_PORT: int = 8000

    DEBUG: bool = False

    # ----- NIST RUNS -----
    NIST_TEST_MODE: Literal['quick', 'standard', 'comprehensive'] = 'quick'
    NIST_MAX_WORKERS: int | None = None
    NIST_RETRY: bool = True

    # ----- LOGGER -----
    LOG_LEVEL: str = 'INFO'
    LOG_TO_FILE: bool = False
    LOG_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S.%f'

    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent

    @property
    def LOGS_DIR(self) -> Path:
        logs_dir = self.BASE_DIR / 'logs'
        Path.mkdir(logs_dir, parents=True, exist_ok=True)
        return logs_dir


env_config = EnvConfig()
