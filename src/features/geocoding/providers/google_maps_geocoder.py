"""Google Maps Geocoding API実装（任意の追加プロバイダー）"""
from typing import Optional

import googlemaps

from ....shared.exceptions.errors import (
    ConfigurationError,
    MalformedResponseError,
    NetworkFailureError,
)
from ....shared.logging.config import get_logger
from ..domain.enums import GeocodeProvider
from ..domain.models import GeocodeResult
from .base import AbstractGeocoder

logger = get_logger(__name__)


class GoogleMapsGeocoder(AbstractGeocoder):
    """
    Google Maps Geocoding API

    APIキーが設定されている場合のみチェーンの最後に追加される
    """

    provider = GeocodeProvider.GOOGLE_MAPS
    requires_http = False

    def __init__(
        self,
        api_key: str,
        timeout: float = 5.0,
        client: Optional[googlemaps.Client] = None,
    ) -> None:
        """
        Args:
            api_key: Google Maps API キー
            timeout: リクエストタイムアウト（秒）
            client: googlemapsクライアント（テスト用に差し替え可能）
        """
        try:
            self.client = client or googlemaps.Client(key=api_key, timeout=timeout)
        except Exception as e:
            raise ConfigurationError(f"Failed to initialize Google Maps client: {e}") from e
        super().__init__()

    def geocode(self, query: str) -> Optional[GeocodeResult]:
        if not query:
            return None

        logger.debug(f"Google Maps geocoding: {query}")

        try:
            results = self.client.geocode(query, region="jp", language="ja")
        except googlemaps.exceptions.Timeout as e:
            raise NetworkFailureError(f"Google Maps timeout: {e}") from e
        except googlemaps.exceptions.TransportError as e:
            raise NetworkFailureError(f"Google Maps transport error: {e}") from e
        except googlemaps.exceptions.ApiError as e:
            raise NetworkFailureError(f"Google Maps API error: {e}") from e

        if not results:
            return None

        result = results[0]
        location = (result.get("geometry") or {}).get("location") or {}
        latitude = location.get("lat")
        longitude = location.get("lng")

        if latitude is None or longitude is None:
            raise MalformedResponseError(f"Google Maps result missing lat/lng: {query}")

        return self._build_result(latitude, longitude, result.get("formatted_address"))
