"""ジオコーディングサービス"""

import threading
from typing import Optional

from ....shared.logging.config import get_logger
from ..domain.models import AddressInput, GeocodeResult
from ..normalization.query_builder import build_queries
from .geocoding_chain import GeocodingChain

logger = get_logger(__name__)


class GeocodingService:
    """住所入力から座標を解決するサービス"""

    def __init__(self, chain: GeocodingChain) -> None:
        """
        Args:
            chain: プロバイダーチェーン
        """
        self.chain = chain
        logger.info("GeocodingService initialized")

    def resolve_address(
        self,
        address: AddressInput,
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[GeocodeResult]:
        """
        住所を座標に解決

        ヒットしないことは通常の結果であり、例外ではなくNoneを返す。
        呼び出し元は手動ピン指定などで対応する。

        Args:
            address: 住所入力
            cancel_event: 中断用イベント

        Returns:
            Optional[GeocodeResult]: 解決結果（見つからない場合はNone）
        """
        queries = build_queries(address)
        logger.debug(f"Candidate queries for {address.display_address()}: {queries}")

        result = self.chain.resolve(queries, cancel_event=cancel_event)

        if result is None:
            logger.warning(f"Failed to resolve address: {address.display_address()}")

        return result
