# services/errors.py


class AnalysisError(Exception):
    """URL 解析パイプラインで発生するエラーの基底クラス。"""


class InvalidUrl(AnalysisError, ValueError):
    """URL として解釈できない文字列が渡された。"""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid URL: {url!r}")


class FetchFailed(AnalysisError):
    """HTTP 取得の失敗（非 2xx / ネットワークエラー / タイムアウト / 非 HTTP スキーム）。"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class BadRequest(AnalysisError):
    """API 境界での入力不備。HTTP 400 に対応する。"""


class AnalysisInternalError(AnalysisError):
    """API 境界での想定外の失敗。HTTP 500 に対応する。"""
