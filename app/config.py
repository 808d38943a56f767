# app/config.py

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    アプリ全体で使う設定クラス。
    .env から環境変数を読み込み、属性として参照できるようにする。
    """

    # ---------- Fetcher（解析サービス側の HTML 取得） ----------
    # USER_AGENT=... を .env に書けば上書きされる
    user_agent: str = "Mozilla/5.0 (compatible; PromptForge/1.0; +https://promptforge.dev)"

    # 取得タイムアウト（秒）。リトライはデフォルトでは行わない
    fetch_timeout: float = 10.0
    fetch_retries: int = 0

    # ---------- Analysis Client（呼び出し側） ----------
    # ANALYSIS_SERVICE_URL=https://example.com/api/analyze-url など
    analysis_service_url: str = "http://localhost:8000/api/analyze-url"
    analysis_client_timeout: float = 15.0

    # ---------- ログ ----------
    log_level: str = "INFO"

    # ---------- Pydantic Settings 設定 ----------
    model_config = SettingsConfigDict(
        env_file=".env",            # .env を読む
        env_file_encoding="utf-8",
        extra="ignore",             # 定義外の環境変数があっても無視（エラーにしない）
    )


@lru_cache
def get_settings() -> Settings:
    """Settings をシングルトン的に使うためのヘルパ。"""
    return Settings()


# 他のモジュールからは `from app.config import settings` で利用
settings = get_settings()
