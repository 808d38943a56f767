# agents/analyzer_agent.py

from __future__ import annotations

import logging

from bs4 import BeautifulSoup

from models.analysis_models import AnalysisResult, HTML_ANALYSIS_CONFIDENCE
from services.html_parser import (
    extract_colors,
    extract_description,
    extract_fonts,
    extract_hsl_colors,
    extract_keywords,
    extract_title,
)

logger = logging.getLogger(__name__)


def analyze_html(html: str, url: str) -> AnalysisResult:
    """
    1 ページ分の HTML から AnalysisResult を組み立てる。

    - title / description : <title> と meta description（無ければ URL から合成）
    - primary / secondary : CSS 中の hex / rgb() の先頭 2 色（白黒は除外）
    - fonts               : font-family 宣言（最大 3 件）
    - keywords            : meta keywords + 固定語彙 + ホスト名ルール（最大 8 件）

    confidence は HTML 解析経路の固定値 (0.85)。
    同じ入力には必ず同じ結果を返し、例外は投げない。
    """
    html = html or ""
    soup = BeautifulSoup(html, "html.parser")

    primary, secondary = extract_colors(html)

    hsl_colors = extract_hsl_colors(html)
    if hsl_colors:
        logger.debug("[analyzer] hsl colors found=%s (not used for palette)", len(hsl_colors))

    result = AnalysisResult(
        title=extract_title(html, url, soup=soup),
        description=extract_description(html, url, soup=soup),
        primary_color=primary,
        secondary_color=secondary,
        fonts=extract_fonts(html),
        keywords=extract_keywords(html, url, soup=soup),
        confidence=HTML_ANALYSIS_CONFIDENCE,
    )

    logger.info(
        "[analyzer] url=%s title=%s colors=%s/%s fonts=%s keywords=%s",
        url,
        result.title,
        result.primary_color,
        result.secondary_color,
        len(result.fonts),
        len(result.keywords),
    )
    return result
