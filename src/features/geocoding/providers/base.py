"""ジオコーダーの基底クラス"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ....shared.exceptions.errors import (
    HTTPError,
    MalformedResponseError,
    NetworkFailureError,
    ValidationError,
)
from ....shared.http.client import HTTPClient
from ....shared.http.rate_limiter import RateLimiter
from ....shared.logging.config import get_logger
from ..domain.enums import GeocodeProvider
from ..domain.models import GeocodeResult

logger = get_logger(__name__)


class AbstractGeocoder(ABC):
    """
    ジオコーディングプロバイダーの抽象基底クラス

    geocode() の契約:
    - ヒットなし: None を返す
    - 接続失敗・タイムアウト: NetworkFailureError
    - 解釈できないレスポンス: MalformedResponseError
    """

    provider: GeocodeProvider
    # HTTP APIを直接呼ぶか（専用クライアントを使うプロバイダーはFalse）
    requires_http: bool = True

    def __init__(
        self,
        http_client: Optional[HTTPClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        """
        Args:
            http_client: HTTPクライアント（Noneかつ requires_http の場合は新規作成）
            rate_limiter: レート制限（Noneの場合は制限なし）
        """
        self.http_client = http_client or (HTTPClient() if self.requires_http else None)
        self.rate_limiter = rate_limiter

        logger.info(f"Geocoder initialized: {self.provider.value}")

    @property
    def name(self) -> str:
        return self.provider.value

    def shape_queries(self, queries: list[str]) -> list[str]:
        """
        候補クエリをこのプロバイダー向けに整形（デフォルトはそのまま）
        """
        return list(queries)

    @abstractmethod
    def geocode(self, query: str) -> Optional[GeocodeResult]:
        """
        クエリ文字列をジオコーディング

        Args:
            query: 候補クエリ

        Returns:
            Optional[GeocodeResult]: 最初にヒットした地点（ヒットなしはNone）

        Raises:
            NetworkFailureError: プロバイダーに到達できない場合
            MalformedResponseError: レスポンスを解釈できない場合
        """
        pass

    def _fetch_json(
        self,
        url: str,
        params: dict[str, Any],
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """
        GETしてJSONを返す（HTTP/デコードエラーをジオコーディング例外に変換）
        """
        if self.rate_limiter:
            self.rate_limiter.wait()

        try:
            return self.http_client.get_json(url, params=params, headers=headers)
        except HTTPError as e:
            raise NetworkFailureError(f"{self.name} request failed: {e}") from e
        except ValueError as e:
            raise MalformedResponseError(f"{self.name} returned non-JSON body: {e}") from e

    def _build_result(self, latitude: Any, longitude: Any, label: Optional[str]) -> GeocodeResult:
        """
        座標値から結果を生成（型変換・範囲チェック失敗はMalformedResponseError）
        """
        try:
            return GeocodeResult(
                latitude=float(latitude),
                longitude=float(longitude),
                label=label or "",
                provider=self.provider,
            )
        except (TypeError, ValueError, ValidationError) as e:
            raise MalformedResponseError(
                f"{self.name} returned invalid coordinates ({latitude}, {longitude}): {e}"
            ) from e
