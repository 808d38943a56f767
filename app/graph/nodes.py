# app/graph/nodes.py
from __future__ import annotations

import logging
from typing import List, Optional

from agents.analyzer_agent import analyze_html
from app.graph.lg_state import GraphState
from models.analysis_models import AnalysisResult
from services.crawler import Fetcher

logger = logging.getLogger(__name__)


def _log_progress(state: GraphState, node: str, message: str) -> GraphState:
    """
    進捗ログを state に積むユーティリティ。
    state は dict (GraphState) として扱う。
    """
    line = f"[{node}] {message}"

    messages: List[str] = list(state.get("progress_messages", []))
    messages.append(line)

    state["progress_messages"] = messages
    state["current_node"] = node

    logger.info(line)
    return state


# ---------- Fetch ノード ----------


def fetch_node(state: GraphState, fetcher: Optional[Fetcher] = None) -> GraphState:
    """
    Fetch ノード:
    state["url"] の HTML を取得して state["html"] に詰める。
    失敗時の FetchFailed はそのまま呼び出し側へ。
    """
    state = _log_progress(state, "fetch", f"start: fetching {state['url']}")

    fetcher = fetcher or Fetcher()
    html = fetcher.fetch(state["url"])
    state["html"] = html

    state = _log_progress(state, "fetch", f"done: fetched {len(html)} chars")
    return state


# ---------- Analyzer ノード ----------


def analyzer_node(state: GraphState) -> GraphState:
    """
    Analyzer ノード:
    取得済み HTML から AnalysisResult を生成する。
    """
    state = _log_progress(state, "analyzer", "start: analyzing html")

    analysis: AnalysisResult = analyze_html(state.get("html") or "", state["url"])
    state["analysis"] = analysis

    state = _log_progress(
        state,
        "analyzer",
        f"done: confidence={analysis.confidence} keywords={len(analysis.keywords)}",
    )
    return state
