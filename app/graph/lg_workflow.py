# app/graph/lg_workflow.py
from __future__ import annotations

import logging
from typing import Optional

from app.graph.lg_state import GraphState, create_initial_state
from app.graph import nodes
from services.crawler import Fetcher

logger = logging.getLogger(__name__)


def run_workflow(url: str, fetcher: Optional[Fetcher] = None) -> GraphState:
    """
    /api/analyze-url 用のシンプルな直列ワークフロー。

    fetch → analyzer
    """
    logger.info("[workflow] run_workflow start url=%s", url)

    state = create_initial_state(url=url)

    # 1) HTML 取得
    state = nodes.fetch_node(state, fetcher=fetcher)

    # 2) パターン抽出 → AnalysisResult
    state = nodes.analyzer_node(state)

    logger.info(
        "[workflow] run_workflow done url=%s current_node=%s",
        url,
        state.get("current_node"),
    )
    logger.debug("[workflow] progress url=%s messages=%s", url, state.get("progress_messages"))
    return state
