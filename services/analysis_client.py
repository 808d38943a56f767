# services/analysis_client.py
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Tuple, Type
from urllib.parse import urlparse

import requests

from app.config import settings
from models.analysis_models import (
    DEFAULT_FONTS,
    DOMAIN_FALLBACK_CONFIDENCE,
    AnalysisResult,
)
from services.domain_profiles import profile_for_hostname
from services.errors import AnalysisError, FetchFailed, InvalidUrl

logger = logging.getLogger(__name__)

Resolver = Callable[[str], AnalysisResult]

# リモート解析の失敗として扱い、フォールバックに回す例外
RECOVERABLE_ERRORS: Tuple[Type[BaseException], ...] = (
    AnalysisError,
    requests.RequestException,
    ValueError,  # JSON デコード失敗 / pydantic の ValidationError
)


class AnalysisState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    DOMAIN_FALLBACK = "domain_fallback"


# ------------------------------------------------------------------
# URL / フォールバック
# ------------------------------------------------------------------
def parse_url_hostname(url: str) -> str:
    """
    URL からホスト名（小文字）を取り出す。
    スキームかホスト名が取れない場合は InvalidUrl。
    """
    if not isinstance(url, str):
        raise InvalidUrl(str(url))
    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except ValueError as e:
        raise InvalidUrl(url) from e
    if not parsed.scheme or not hostname:
        raise InvalidUrl(url)
    return hostname.lower()


def domain_fallback_analysis(url: str) -> AnalysisResult:
    """
    ネットワークを使わず、ホスト名だけから AnalysisResult を作る。
    confidence はフォールバック経路の固定値 (0.7)。
    """
    hostname = parse_url_hostname(url)
    profile = profile_for_hostname(hostname)

    logger.info(
        "[analysis_client] state=%s host=%s keywords=%s",
        AnalysisState.DOMAIN_FALLBACK.value,
        hostname,
        profile.keywords,
    )

    return AnalysisResult(
        title=f"Analysis of {hostname}",
        description=f"Automated analysis of {url}",
        primary_color=profile.primary_color,
        secondary_color=profile.secondary_color,
        fonts=list(DEFAULT_FONTS),
        keywords=profile.keywords,
        confidence=DOMAIN_FALLBACK_CONFIDENCE,
    )


def with_fallback(
    primary: Resolver,
    fallback: Resolver,
    recover: Tuple[Type[BaseException], ...] = RECOVERABLE_ERRORS,
) -> Resolver:
    """
    primary(url) を試し、recover に含まれる例外なら fallback(url) を返す
    2 段構えの resolver を作る。
    """

    def _resolve(url: str) -> AnalysisResult:
        try:
            return primary(url)
        except recover as e:
            logger.warning(
                "[analysis_client] state=%s url=%s error=%s: %s",
                AnalysisState.FAILED.value,
                url,
                type(e).__name__,
                e,
            )
            return fallback(url)

    return _resolve


# ------------------------------------------------------------------
# クライアント本体
# ------------------------------------------------------------------
class AnalysisClient:
    """
    解析サービス (/api/analyze-url) を呼び出すクライアント。
    サービス側が失敗した場合はドメインヒューリスティックに切り替え、
    呼び出し側には InvalidUrl 以外の例外を返さない。
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint or settings.analysis_service_url
        self.timeout = timeout if timeout is not None else settings.analysis_client_timeout
        self.session = session

    def try_remote_analysis(self, url: str) -> AnalysisResult:
        """解析サービスを 1 回だけ呼ぶ。失敗時は例外をそのまま投げる。"""
        logger.info(
            "[analysis_client] state=%s endpoint=%s url=%s",
            AnalysisState.REQUESTING.value,
            self.endpoint,
            url,
        )

        resp = (self.session or requests).post(
            self.endpoint,
            json={"url": url},
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )

        if not (200 <= resp.status_code < 300):
            logger.error(
                "[analysis_client] Non-2xx status: %s body=%s",
                resp.status_code,
                resp.text[:500],
            )
            raise FetchFailed(f"Analysis failed: {resp.status_code} {resp.reason or ''}".rstrip())

        result = AnalysisResult.model_validate(resp.json())

        logger.info(
            "[analysis_client] state=%s url=%s confidence=%s",
            AnalysisState.SUCCEEDED.value,
            url,
            result.confidence,
        )
        return result

    def analyze_url(self, url: str) -> AnalysisResult:
        """
        URL を解析して AnalysisResult を返す。

        - URL 自体が解釈できない場合だけ InvalidUrl を投げる
        - それ以外の失敗（ネットワーク / 非 2xx / 不正なレスポンス）は
          ドメインヒューリスティックで補う
        """
        url = url.strip() if isinstance(url, str) else url
        parse_url_hostname(url)
        logger.debug("[analysis_client] state=%s url=%s", AnalysisState.IDLE.value, url)

        resolve = with_fallback(self.try_remote_analysis, domain_fallback_analysis)
        return resolve(url)


def analyze_url(url: str) -> AnalysisResult:
    """settings の値で AnalysisClient を作って 1 回解析するショートカット。"""
    return AnalysisClient().analyze_url(url)
