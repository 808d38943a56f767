# agents/config_agent.py

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import yaml

from models.analysis_models import (
    DEFAULT_FONTS,
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_SECONDARY_COLOR,
    AnalysisResult,
)
from models.project_models import ProjectConfigInput

logger = logging.getLogger(__name__)

# ============================================================
# 固定値（出力互換のため変更しないこと）
# ============================================================

CONFIG_VERSION = "1.0"
PLACEHOLDER_TOKEN = "[[PLACEHOLDER]]"

DEFAULT_PRIMARY_GOAL = "web application"
DEFAULT_MISSION_TARGET = "achieve their goals"
DEFAULT_DOMAIN_TAG = "general"

OUTPUT_SECTIONS = ["intro", "core", "qa"]
OUTPUT_REQUIRED_KEYS = ["acceptance_criteria", "delivery_notes"]

PROCESS_ORDER = [
    "analyze_inputs",
    "define_architecture",
    "implement_core",
    "apply_brand_tokens",
    "verify_quality_gates",
]

MIN_PERFORMANCE_SCORE = 90
ACCESSIBILITY_LEVEL = "WCAG AA"
REQUIRED_SECURITY_HEADERS = [
    "Content-Security-Policy",
    "Strict-Transport-Security",
    "X-Content-Type-Options",
    "X-Frame-Options",
    "Referrer-Policy",
]

DEFAULT_TOGGLES: Dict[str, Any] = {
    "responsive": True,
    "dark_mode": False,
    "animations": True,
    "accessibility": True,
    "seo": True,
    "analytics": False,
    "i18n": False,
    "authentication": False,
    "pwa": False,
    "cms": False,
    "styling": "tailwind",
    "state_management": "local",
}


# ============================================================
# セクション単位のビルダ
# ============================================================

def _build_mission(project: ProjectConfigInput) -> str:
    goal = project.primary_goal or DEFAULT_PRIMARY_GOAL
    target = project.description or DEFAULT_MISSION_TARGET
    return f"Produce a {goal} that enables users to {target}"


def _build_defaults(analysis: Optional[AnalysisResult]) -> Dict[str, Any]:
    """analysis 由来の値。analysis が無ければ HTML 解析と同じ既定値を使う。"""
    if analysis is None:
        primary, secondary = DEFAULT_PRIMARY_COLOR, DEFAULT_SECONDARY_COLOR
        fonts: List[str] = list(DEFAULT_FONTS)
        keywords: List[str] = []
    else:
        primary, secondary = analysis.primary_color, analysis.secondary_color
        fonts = list(analysis.fonts) or list(DEFAULT_FONTS)
        keywords = list(analysis.keywords)

    return {
        "palette": {"primary": primary, "secondary": secondary},
        "typography": {
            "headings": fonts[0],
            "body": fonts[1] if len(fonts) > 1 else fonts[0],
        },
        "keywords": keywords,
    }


def _build_source(project: ProjectConfigInput, analysis: Optional[AnalysisResult]) -> Dict[str, Any]:
    source: Dict[str, Any] = {"url": project.source_url}
    if analysis is not None:
        source["title"] = analysis.title
        source["description"] = analysis.description
        source["confidence"] = analysis.confidence
    return source


# ============================================================
# メインロジック
# ============================================================

def build_config_data(
    project: ProjectConfigInput,
    analysis: Optional[AnalysisResult] = None,
) -> Dict[str, Any]:
    """
    プロジェクト入力 + 解析結果から Config ドキュメントの中身（順序付き dict）を作る。
    入力値は常にスカラ値として埋め込むので、ユーザー入力で構造が壊れることはない。
    """
    data: Dict[str, Any] = {
        "version": CONFIG_VERSION,
        "project": {
            "name": project.name or PLACEHOLDER_TOKEN,
            "mission": _build_mission(project),
            "domain": project.domain or DEFAULT_DOMAIN_TAG,
        },
        "output_contract": {
            "sections": list(OUTPUT_SECTIONS),
            "required_keys": list(OUTPUT_REQUIRED_KEYS),
        },
        "process_order": list(PROCESS_ORDER),
        "quality_gates": {
            "lint": "required",
            "typecheck": "required",
            "tests": "required",
            "performance_min_score": MIN_PERFORMANCE_SCORE,
            "accessibility": ACCESSIBILITY_LEVEL,
            "security_headers": list(REQUIRED_SECURITY_HEADERS),
        },
        "missing_input_policy": {
            "strategy": "placeholder",
            "placeholder": PLACEHOLDER_TOKEN,
        },
        "defaults": _build_defaults(analysis),
        "toggles": dict(DEFAULT_TOGGLES),
    }

    if project.source_url:
        data["source"] = _build_source(project, analysis)

    if project.component_urls:
        data["components"] = [{"url": u} for u in project.component_urls]

    return data


def synthesize_config(
    project: ProjectConfigInput,
    analysis: Optional[AnalysisResult] = None,
) -> str:
    """
    Config ドキュメント（YAML テキスト）を生成する。
    同じ入力なら必ず同じテキストを返す。
    """
    missing = project.missing_required_fields()
    if missing:
        logger.warning("[config] missing required fields=%s, using placeholder", missing)

    data = build_config_data(project, analysis)
    document = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)

    logger.info(
        "[config] synthesized name=%s analysis=%s sections=%s",
        project.name,
        "YES" if analysis else "NO",
        list(data.keys()),
    )
    return document
