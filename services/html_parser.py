# services/html_parser.py

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from models.analysis_models import (
    DEFAULT_FONTS,
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_SECONDARY_COLOR,
    MAX_FONTS,
    MAX_KEYWORDS,
)

logger = logging.getLogger(__name__)

# ============================================================
# パターン定義
# ============================================================

# hex (#RRGGBB / #RGB) と rgb(r, g, b) を 1 回の走査で文書順に拾う
_COLOR_RE = re.compile(
    r"(?P<hex>#(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})\b)"
    r"|rgb\(\s*(?P<r>[0-9]+)\s*,\s*(?P<g>[0-9]+)\s*,\s*(?P<b>[0-9]+)\s*\)"
)
_HSL_RE = re.compile(r"hsl\(\s*([0-9]+)\s*,\s*([0-9]+)%\s*,\s*([0-9]+)%\s*\)")
_FONT_FAMILY_RE = re.compile(r"font-family\s*:\s*([^;}]+)", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")

# 白・黒はほぼ全サイトにあるのでブランド色としては無視する
_IGNORED_COLORS = {"#ffffff", "#fff", "#000000", "#000"}

# 汎用フォールバック書体はフォント名として扱わない
_GENERIC_FONT_MARKERS = ("serif", "sans-serif", "monospace")

TECH_KEYWORDS = [
    "react", "vue", "angular", "javascript", "typescript", "api", "database",
    "cloud", "ai", "ml", "saas", "productivity", "automation", "analytics",
    "dashboard", "workflow",
]
BUSINESS_KEYWORDS = [
    "business", "enterprise", "startup", "growth", "marketing", "sales",
    "customer", "service", "platform", "solution",
]

# ホスト名に含まれる文字列 → 追加するキーワード
_DOMAIN_KEYWORD_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("github",), "developer"),
    (("design",), "design"),
    (("pay", "stripe"), "payments"),
]


# ============================================================
# ユーティリティ
# ============================================================

def _make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def _find_meta_content(soup: BeautifulSoup, name: str) -> Optional[str]:
    """<meta name="..." content="..."> の content を返す（name は大文字小文字を無視）。"""
    tag = soup.find("meta", attrs={"name": re.compile(rf"^{name}$", re.IGNORECASE)})
    if tag is None:
        return None
    content = tag.get("content")
    if not content:
        return None
    return content.strip() or None


def extract_domain_name(url: str) -> str:
    """URL のホスト名（先頭の www. は除去）。取れなければ "website"。"""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None
    if not hostname:
        return "website"
    if hostname.startswith("www."):
        hostname = hostname[len("www."):]
    return hostname


def _normalize_hex(color: str) -> str:
    """#RGB を #RRGGBB に展開する。"""
    if len(color) == 4:
        return "#" + "".join(ch * 2 for ch in color[1:])
    return color


def _rgb_to_hex(r: str, g: str, b: str) -> str:
    channels = []
    for v in (r, g, b):
        digits = v.lstrip("0") or "0"
        # 4 桁以上は 255 を超えるので int 変換せずに上限へ寄せる
        channels.append(255 if len(digits) > 3 else min(int(digits), 255))
    return "#" + "".join(f"{c:02x}" for c in channels)


# ============================================================
# 各 Extractor
# ============================================================

def extract_title(html: str, url: str, soup: Optional[BeautifulSoup] = None) -> str:
    """最初の <title>。無ければドメイン名。"""
    soup = soup if soup is not None else _make_soup(html)
    if soup.title is not None:
        title = soup.title.get_text(strip=True)
        if title:
            return title
    return extract_domain_name(url)


def extract_description(html: str, url: str, soup: Optional[BeautifulSoup] = None) -> str:
    """meta description。属性の順序は問わない。"""
    soup = soup if soup is not None else _make_soup(html)
    content = _find_meta_content(soup, "description")
    if content:
        return content
    return f"Website analysis for {extract_domain_name(url)}"


def extract_color_candidates(html: str) -> List[str]:
    """
    文書中の色指定を出現順に集め、白・黒を除いた候補を返す。
    - hex はそのまま（3 桁は 6 桁に展開）
    - rgb() は 2 桁ゼロ埋めの hex に変換
    重複除去や頻度順の並び替えはしない。
    """
    candidates: List[str] = []
    for m in _COLOR_RE.finditer(html or ""):
        if m.group("hex"):
            color = m.group("hex")
        else:
            color = _rgb_to_hex(m.group("r"), m.group("g"), m.group("b"))
        if color.lower() in _IGNORED_COLORS:
            continue
        candidates.append(_normalize_hex(color))
    return candidates


def extract_colors(html: str) -> Tuple[str, str]:
    """(primary, secondary)。足りない分はデフォルト色で埋める。"""
    candidates = extract_color_candidates(html)
    primary = candidates[0] if len(candidates) > 0 else DEFAULT_PRIMARY_COLOR
    secondary = candidates[1] if len(candidates) > 1 else DEFAULT_SECONDARY_COLOR
    return primary, secondary


def extract_hsl_colors(html: str) -> List[Tuple[str, str, str]]:
    """
    hsl(h, s%, l%) を拾うだけ。パレットには使わないので数値変換もしない。
    """
    return _HSL_RE.findall(html or "")


def extract_fonts(html: str) -> List[str]:
    """font-family 宣言からフォント名を最大 3 件。汎用書体は除外。"""
    fonts: List[str] = []
    for value in _FONT_FAMILY_RE.findall(html or ""):
        for raw in value.split(","):
            font = re.sub(r"\s+", " ", raw.strip().replace('"', "").replace("'", ""))
            lowered = font.lower()
            if any(marker in lowered for marker in _GENERIC_FONT_MARKERS):
                continue
            if len(font) <= 2:
                continue
            if font not in fonts:
                fonts.append(font)

    if not fonts:
        return list(DEFAULT_FONTS)
    return fonts[:MAX_FONTS]


def _strip_tags(html: str) -> str:
    return _TAG_RE.sub(" ", html or "").lower()


def extract_keywords(html: str, url: str, soup: Optional[BeautifulSoup] = None) -> List[str]:
    """
    キーワード候補を 3 ソースから集める（小文字・重複なし・最大 8 件）。

    1) <meta name="keywords">
    2) 固定語彙（技術系 + ビジネス系）が本文テキストに含まれるか
    3) ホスト名ベースのルール
    """
    soup = soup if soup is not None else _make_soup(html)
    keywords: List[str] = []

    def _add(keyword: str) -> None:
        keyword = keyword.strip().lower()
        if keyword and keyword not in keywords:
            keywords.append(keyword)

    meta = _find_meta_content(soup, "keywords")
    if meta:
        for k in meta.split(","):
            _add(k)

    text = _strip_tags(html)
    for k in TECH_KEYWORDS + BUSINESS_KEYWORDS:
        if k in text:
            _add(k)

    domain = extract_domain_name(url).lower()
    for markers, keyword in _DOMAIN_KEYWORD_RULES:
        if any(marker in domain for marker in markers):
            _add(keyword)

    return keywords[:MAX_KEYWORDS]
