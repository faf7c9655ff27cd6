"""郵便番号検索API（zipcloud）クライアント"""
from typing import Any, Optional

from ....shared.exceptions.errors import HTTPError
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger
from ...geocoding.domain.enums import PREFECTURE_NAME_SET, PrefectureCode
from ...geocoding.normalization.normalizer import format_postal_code
from ..domain.models import PostalAddress

logger = get_logger(__name__)

ZIPCLOUD_SEARCH_URL = "https://zipcloud.ibsnet.co.jp/api/search"


class ZipcloudClient:
    """
    郵便番号 → 都道府県・市区町村 の検索

    ジオコーダーと同様、該当なし・通信エラー・不正レスポンスは
    すべてNoneとして扱う
    """

    def __init__(
        self,
        endpoint: str = ZIPCLOUD_SEARCH_URL,
        http_client: Optional[HTTPClient] = None,
    ) -> None:
        """
        Args:
            endpoint: 検索APIのURL
            http_client: HTTPクライアント
        """
        self.endpoint = endpoint
        self.http_client = http_client or HTTPClient()
        logger.info("ZipcloudClient initialized")

    def lookup(self, postal_code: str) -> Optional[PostalAddress]:
        """
        郵便番号から住所を検索

        Args:
            postal_code: 郵便番号（ハイフン有無・全角を許容）

        Returns:
            Optional[PostalAddress]: 住所（見つからない場合はNone）
        """
        formatted = format_postal_code(postal_code)
        if formatted is None:
            logger.warning(f"Invalid postal code format: {postal_code}")
            return None

        try:
            data = self.http_client.get_json(
                self.endpoint, params={"zipcode": formatted.replace("-", "")}
            )
        except HTTPError as e:
            logger.warning(f"Postal code lookup failed for {formatted}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Postal code lookup returned non-JSON body for {formatted}: {e}")
            return None

        return self._parse(formatted, data)

    def _parse(self, postal_code: str, data: Any) -> Optional[PostalAddress]:
        if not isinstance(data, dict) or data.get("status") != 200:
            message = data.get("message") if isinstance(data, dict) else data
            logger.warning(f"Postal code lookup error for {postal_code}: {message}")
            return None

        results = data.get("results") or []
        if not isinstance(results, list):
            logger.warning(f"Unexpected results in postal code response for {postal_code}: {results!r}")
            return None
        if not results:
            logger.info(f"No address found for postal code: {postal_code}")
            return None

        result = results[0]
        if not isinstance(result, dict):
            logger.warning(f"Unexpected result entry for {postal_code}: {result!r}")
            return None

        prefecture = self._parse_prefecture(result)
        if prefecture is None:
            logger.warning(f"Unexpected prefecture in postal code result: {result!r}")
            return None

        city_town = f"{result.get('address2') or ''}{result.get('address3') or ''}"
        address = PostalAddress(
            postal_code=postal_code,
            prefecture=prefecture,
            city_town=city_town,
        )
        logger.debug(f"Postal code resolved: {address}")
        return address

    def _parse_prefecture(self, result: dict[str, Any]) -> Optional[str]:
        """
        address1 の都道府県名を prefcode（JISコード）と照合

        Returns:
            Optional[str]: 都道府県名（不明・食い違いの場合はNone）
        """
        prefecture = result.get("address1") or ""
        if prefecture not in PREFECTURE_NAME_SET:
            return None

        prefcode = result.get("prefcode")
        if prefcode is None:
            return prefecture

        try:
            expected = PrefectureCode(str(prefcode).zfill(2)).name_ja
        except ValueError:
            return None

        return prefecture if expected == prefecture else None
