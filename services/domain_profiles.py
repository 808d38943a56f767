# services/domain_profiles.py

from __future__ import annotations

from typing import Dict, List

from models.analysis_models import DomainProfile

# ホスト名に含まれる文字列 → ブランド色とキーワード
# 上から順に判定し、最初に一致したものを使う
DOMAIN_PROFILES: List[Dict] = [
    {
        "match": "github",
        "primary_color": "#24292e",
        "secondary_color": "#0366d6",
        "keywords": ["developer", "code", "repository", "open source"],
    },
    {
        "match": "stripe",
        "primary_color": "#635bff",
        "secondary_color": "#00d924",
        "keywords": ["payments", "fintech", "business", "api"],
    },
    {
        "match": "figma",
        "primary_color": "#f24e1e",
        "secondary_color": "#a259ff",
        "keywords": ["design", "collaboration", "ui", "creative"],
    },
    {
        "match": "notion",
        "primary_color": "#000000",
        "secondary_color": "#37352f",
        "keywords": ["productivity", "workspace", "collaboration", "notes"],
    },
]


def profile_for_hostname(hostname: str) -> DomainProfile:
    """
    ホスト名だけからブランド色・キーワードを推定する。
    ネットワークアクセスはしない。該当なしならデフォルト色 + キーワードなし。
    """
    host = (hostname or "").lower()
    for entry in DOMAIN_PROFILES:
        if entry["match"] in host:
            return DomainProfile(
                primary_color=entry["primary_color"],
                secondary_color=entry["secondary_color"],
                keywords=list(entry["keywords"]),
            )
    return DomainProfile()
