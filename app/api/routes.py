# app/api/routes.py
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.config import settings
from app.graph.lg_workflow import run_workflow
from models.analysis_models import AnalysisResult
from services.crawler import Fetcher
from services.errors import AnalysisInternalError, BadRequest, FetchFailed

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


# --------- 依存関係 ---------


def get_fetcher() -> Fetcher:
    """リクエストごとに Fetcher を作る（リクエスト間で状態は共有しない）。"""
    return Fetcher(timeout=settings.fetch_timeout, retries=settings.fetch_retries)


# --------- ヘルパ ---------


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=CORS_HEADERS)


async def _read_url(request: Request) -> str:
    """リクエストボディ {"url": "..."} から url を取り出す。"""
    try:
        body: Any = await request.json()
    except ValueError as e:
        raise BadRequest("URL is required") from e

    url = body.get("url") if isinstance(body, dict) else None
    if not isinstance(url, str) or not url.strip():
        raise BadRequest("URL is required")
    return url.strip()


def _run_analysis(url: str, fetcher: Fetcher) -> AnalysisResult:
    """
    fetch → analyzer を実行する。
    失敗はすべて AnalysisInternalError にまとめて返す（メッセージは元の例外のもの）。
    """
    try:
        state = run_workflow(url, fetcher=fetcher)
    except FetchFailed as e:
        logger.warning("[api.analyze-url] fetch failed url=%s reason=%s", url, e.reason)
        raise AnalysisInternalError(e.reason) from e
    except Exception as e:
        logger.exception("[api.analyze-url] unexpected error url=%s", url)
        raise AnalysisInternalError(str(e)) from e
    return state["analysis"]


# --------- エンドポイント ---------


@router.options("/analyze-url")
def api_analyze_url_preflight() -> Response:
    """CORS preflight。本文なしで許可ヘッダだけ返す。"""
    return Response(status_code=204, headers=CORS_HEADERS)


@router.post("/analyze-url")
async def api_analyze_url(request: Request, fetcher: Fetcher = Depends(get_fetcher)) -> Response:
    """
    URL を受け取り、HTML を取得して AnalysisResult を返すメインAPI。

    - 400: url が無い
    - 200: AnalysisResult (camelCase)
    - 500: 取得・解析の失敗
    """
    try:
        url = await _read_url(request)
    except BadRequest as e:
        logger.info("[api.analyze-url] bad request: %s", e)
        return _error_response(400, str(e))

    logger.info("[api.analyze-url] start url=%s", url)

    try:
        analysis = await run_in_threadpool(_run_analysis, url, fetcher)
    except AnalysisInternalError as e:
        return _error_response(500, str(e))

    logger.info("[api.analyze-url] done url=%s confidence=%s", url, analysis.confidence)
    return JSONResponse(analysis.to_response(), headers=CORS_HEADERS)


@router.get("/health")
def api_health() -> dict:
    return {"status": "ok"}
