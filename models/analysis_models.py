# models/analysis_models.py

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# ============================================================
# 既定値（HTML 解析・フォールバック・Config 生成で共通）
# ============================================================

DEFAULT_PRIMARY_COLOR = "#3B82F6"
DEFAULT_SECONDARY_COLOR = "#10B981"
DEFAULT_FONTS = ["Inter", "SF Pro Display"]

MAX_FONTS = 3
MAX_KEYWORDS = 8

# confidence は「どの経路で作られたか」を表す固定値
HTML_ANALYSIS_CONFIDENCE = 0.85
DOMAIN_FALLBACK_CONFIDENCE = 0.7

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class AnalysisResult(BaseModel):
    """
    1 URL 分の解析結果。
    - API の入出力は camelCase (primaryColor など)
    - Python 側では snake_case でアクセスする
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    primary_color: str = Field(DEFAULT_PRIMARY_COLOR, pattern=HEX_COLOR_PATTERN)
    secondary_color: str = Field(DEFAULT_SECONDARY_COLOR, pattern=HEX_COLOR_PATTERN)
    fonts: List[str] = Field(
        default_factory=lambda: list(DEFAULT_FONTS),
        min_length=1,
        max_length=MAX_FONTS,
    )
    keywords: List[str] = Field(default_factory=list, max_length=MAX_KEYWORDS)
    confidence: float = Field(..., ge=0.0, le=1.0)

    def to_response(self) -> dict:
        """API レスポンス用に camelCase の dict を返す。"""
        return self.model_dump(by_alias=True)


class DomainProfile(BaseModel):
    """ホスト名だけから推定するブランド情報（フォールバック用）。"""

    primary_color: str = DEFAULT_PRIMARY_COLOR
    secondary_color: str = DEFAULT_SECONDARY_COLOR
    keywords: List[str] = Field(default_factory=list)
