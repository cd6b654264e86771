from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8')

    app_name: str = 'NAS File Manager'
    app_host: str = '0.0.0.0'
    app_port: int = 7443
    database_url: str = 'sqlite:////var/lib/nas-files/nas_files.db'
    jwt_secret: str = 'change-me'
    jwt_algorithm: str = 'HS256'
    jwt_expire_minutes: int = 120
    nas_root: str = '/srv/nas'
    tls_cert_file: str = '/etc/nas-files/cert.pem'
    tls_key_file: str = '/etc/nas-files/key.pem'
    log_level: str = 'info'
    cors_origins: str = ''
    download_chunk_size: int = Field(default=1024 * 1024, ge=4096, le=16 * 1024 * 1024)


settings = Settings()
