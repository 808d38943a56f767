# app/graph/lg_state.py
from __future__ import annotations

from typing import Any, Dict


class GraphState(Dict[str, Any]):
    """
    LangGraph 風の「状態」コンテナ。
    実体はただの dict だが、型ヒントとして分かりやすくするためのラッパ。

    キー:
      url / html / analysis / progress_messages / current_node
    """
    pass


def create_initial_state(url: str) -> GraphState:
    """
    ワークフロー開始時の初期 state を作成。
    """
    state: GraphState = GraphState()
    state["url"] = url
    state["html"] = None
    state["analysis"] = None
    state["progress_messages"] = []  # 各ノードからのログ的メッセージ
    state["current_node"] = None
    return state
