# services/crawler.py

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

import requests

from app.config import settings
from services.errors import FetchFailed

logger = logging.getLogger(__name__)


class Fetcher:
    """
    単純な GET だけのクロール。
    タイムアウトとリトライ回数は呼び出し側から明示的に渡す
    （デフォルトは settings の値、リトライなし）。
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        retries: int = 0,
        user_agent: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout if timeout is not None else settings.fetch_timeout
        self.retries = max(0, retries)
        self.user_agent = user_agent or settings.user_agent
        # session を渡されなければ requests.get をそのまま使う
        self.session = session

    def fetch(self, url: str) -> str:
        """URL の本文をテキストで返す。失敗はすべて FetchFailed。"""
        try:
            scheme = urlparse(url).scheme.lower()
        except ValueError as e:
            raise FetchFailed(f"Failed to fetch URL: {e}") from e
        if scheme not in ("http", "https"):
            raise FetchFailed(f"Unsupported URL scheme: {scheme or '(none)'}")

        headers = {"User-Agent": self.user_agent}
        attempts = self.retries + 1
        last_error: Optional[FetchFailed] = None

        for attempt in range(1, attempts + 1):
            try:
                resp = (self.session or requests).get(url, headers=headers, timeout=self.timeout)
            except requests.RequestException as e:
                logger.warning("[crawler] request error url=%s attempt=%s/%s: %s", url, attempt, attempts, e)
                last_error = FetchFailed(f"Failed to fetch URL: {e}")
                continue

            if 200 <= resp.status_code < 300:
                logger.info("[crawler] fetched url=%s status=%s length=%s", url, resp.status_code, len(resp.text))
                return resp.text

            error = FetchFailed(f"Failed to fetch URL: {resp.status_code} {resp.reason or ''}".rstrip())
            logger.warning("[crawler] non-2xx url=%s status=%s attempt=%s/%s", url, resp.status_code, attempt, attempts)
            # 4xx はリトライしても結果が変わらない
            if resp.status_code < 500:
                raise error
            last_error = error

        raise last_error


def fetch_html(url: str, timeout: Optional[float] = None, retries: Optional[int] = None) -> str:
    """settings の値で Fetcher を作って 1 回取得するショートカット。"""
    fetcher = Fetcher(
        timeout=timeout,
        retries=settings.fetch_retries if retries is None else retries,
    )
    return fetcher.fetch(url)
