"""国土地理院 住所検索API実装"""
from typing import Any, Optional

from ....shared.exceptions.errors import MalformedResponseError
from ....shared.http.client import HTTPClient
from ....shared.http.rate_limiter import RateLimiter
from ....shared.logging.config import get_logger
from ..domain.enums import GeocodeProvider
from ..domain.models import GeocodeResult
from .base import AbstractGeocoder

logger = get_logger(__name__)

GSI_ADDRESS_SEARCH_URL = "https://msearch.gsi.go.jp/address-search/AddressSearch"


class GsiGeocoder(AbstractGeocoder):
    """
    国土地理院 住所検索API（一次プロバイダー）

    レスポンスは GeoJSON Feature の配列で、座標は [経度, 緯度] の順
    """

    provider = GeocodeProvider.GSI

    def __init__(
        self,
        endpoint: str = GSI_ADDRESS_SEARCH_URL,
        http_client: Optional[HTTPClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        """
        Args:
            endpoint: 住所検索APIのURL
            http_client: HTTPクライアント
            rate_limiter: レート制限
        """
        self.endpoint = endpoint
        super().__init__(http_client=http_client, rate_limiter=rate_limiter)

    def geocode(self, query: str) -> Optional[GeocodeResult]:
        if not query:
            return None

        logger.debug(f"GSI geocoding: {query}")
        features = self._fetch_json(self.endpoint, params={"q": query})

        if not isinstance(features, list):
            raise MalformedResponseError(
                f"GSI returned unexpected payload type: {type(features).__name__}"
            )
        if not features:
            return None

        return self._parse_feature(features[0])

    def _parse_feature(self, feature: Any) -> GeocodeResult:
        try:
            coordinates = feature["geometry"]["coordinates"]
            longitude, latitude = coordinates[0], coordinates[1]
            title = (feature.get("properties") or {}).get("title")
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise MalformedResponseError(f"GSI feature missing geometry: {feature!r}") from e

        # GeoJSON は [経度, 緯度] の順
        return self._build_result(latitude, longitude, title)
