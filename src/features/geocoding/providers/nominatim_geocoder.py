"""OpenStreetMap Nominatim 実装"""
from typing import Optional

from ....shared.exceptions.errors import MalformedResponseError
from ....shared.http.client import HTTPClient
from ....shared.http.rate_limiter import RateLimiter
from ....shared.logging.config import get_logger
from ..domain.enums import GeocodeProvider
from ..domain.models import GeocodeResult
from ..normalization.query_builder import (
    dedupe_queries,
    is_postal_code_query,
    strip_block_numbers,
)
from .base import AbstractGeocoder

logger = get_logger(__name__)

NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"
DEFAULT_NOMINATIM_USER_AGENT = "fab-store-locator/1.0 (store address geocoding; low request rate)"


class NominatimGeocoder(AbstractGeocoder):
    """
    OpenStreetMap Nominatim（二次プロバイダー）

    共有サービスのため、識別可能なUser-Agentを送り、
    1リクエスト/秒以下に制限する
    """

    provider = GeocodeProvider.NOMINATIM

    def __init__(
        self,
        endpoint: str = NOMINATIM_SEARCH_URL,
        user_agent: str = DEFAULT_NOMINATIM_USER_AGENT,
        accept_language: str = "ja",
        http_client: Optional[HTTPClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        """
        Args:
            endpoint: 検索APIのURL
            user_agent: クライアント識別用User-Agent
            accept_language: 結果の言語ヒント
            http_client: HTTPクライアント
            rate_limiter: レート制限（Noneの場合は1リクエスト/秒）
        """
        self.endpoint = endpoint
        self.user_agent = user_agent
        self.accept_language = accept_language
        super().__init__(
            http_client=http_client,
            rate_limiter=rate_limiter or RateLimiter(requests_per_second=1.0),
        )

    def shape_queries(self, queries: list[str]) -> list[str]:
        """
        Nominatim向けのクエリ列

        番地付きの住所 → 番地を除いた町域 → 郵便番号 の順。
        OSMは番地レベルのデータが乏しいため町域レベルまで粗くする
        """
        postal = [q for q in queries if is_postal_code_query(q)]
        textual = [q for q in queries if not is_postal_code_query(q)]
        town_level = [strip_block_numbers(q) for q in textual]
        return dedupe_queries(textual + town_level + postal)

    def geocode(self, query: str) -> Optional[GeocodeResult]:
        if not query:
            return None

        logger.debug(f"Nominatim geocoding: {query}")
        params = {
            "q": query,
            "format": "json",
            "limit": 1,
            "countrycodes": "jp",
            "accept-language": self.accept_language,
        }
        headers = {
            "User-Agent": self.user_agent,
            "Accept-Language": self.accept_language,
        }
        places = self._fetch_json(self.endpoint, params=params, headers=headers)

        if not isinstance(places, list):
            raise MalformedResponseError(
                f"Nominatim returned unexpected payload type: {type(places).__name__}"
            )
        if not places:
            return None

        place = places[0]
        if not isinstance(place, dict) or "lat" not in place or "lon" not in place:
            raise MalformedResponseError(f"Nominatim place missing lat/lon: {place!r}")

        # lat/lon は文字列で返る
        return self._build_result(place["lat"], place["lon"], place.get("display_name"))
