"""ジオコーディングプロバイダーのフォールバックチェーン"""

import threading
from typing import Iterator, Optional, Sequence

from ....shared.exceptions.errors import MalformedResponseError, NetworkFailureError
from ....shared.logging.config import get_logger
from ..domain.enums import FailureKind
from ..domain.models import GeocodeResult
from ..providers.base import AbstractGeocoder

logger = get_logger(__name__)


class GeocodingChain:
    """
    プロバイダーを優先順に試すジオコーディングチェーン

    各プロバイダーについて、候補クエリを1件ずつ順番に問い合わせ、
    最初にヒットした時点で終了する。一次プロバイダーが全候補で
    ヒットしなかった場合のみ次のプロバイダーに進む。
    個々の失敗（接続失敗・空結果・不正レスポンス）は記録するだけで
    呼び出し元には送出しない。
    """

    def __init__(self, providers: Sequence[AbstractGeocoder]) -> None:
        """
        Args:
            providers: 優先順のプロバイダー
        """
        if not providers:
            raise ValueError("GeocodingChain requires at least one provider")

        self.providers = list(providers)
        logger.info(
            f"GeocodingChain initialized: {[p.name for p in self.providers]}"
        )

    def iter_attempts(
        self, queries: Sequence[str]
    ) -> Iterator[tuple[AbstractGeocoder, str]]:
        """
        (プロバイダー, クエリ) の組を試行順に生成

        クエリ列はプロバイダーごとに shape_queries() で整形される
        """
        for provider in self.providers:
            for query in provider.shape_queries(list(queries)):
                yield provider, query

    def resolve(
        self,
        queries: Sequence[str],
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[GeocodeResult]:
        """
        候補クエリを順に問い合わせ、最初の結果を返す

        Args:
            queries: 具体的な順の候補クエリ
            cancel_event: セットされた場合は途中で打ち切る

        Returns:
            Optional[GeocodeResult]: 結果（全プロバイダー・全候補でヒットなし、
            または中断された場合はNone）
        """
        if not queries:
            return None

        failures: dict[FailureKind, int] = {kind: 0 for kind in FailureKind}

        for provider, query in self.iter_attempts(queries):
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Geocoding cancelled; discarding attempt")
                return None

            try:
                result = provider.geocode(query)
            except NetworkFailureError as e:
                failures[FailureKind.NETWORK_FAILURE] += 1
                logger.warning(f"[{provider.name}] network failure for '{query}': {e}")
                continue
            except MalformedResponseError as e:
                failures[FailureKind.MALFORMED_RESPONSE] += 1
                logger.warning(f"[{provider.name}] malformed response for '{query}': {e}")
                continue

            if result is None:
                failures[FailureKind.EMPTY_RESULT] += 1
                logger.debug(f"[{provider.name}] no match for '{query}'")
                continue

            if cancel_event is not None and cancel_event.is_set():
                logger.info("Geocoding cancelled after response; discarding result")
                return None

            logger.info(
                f"[{provider.name}] resolved '{query}' -> "
                f"({result.latitude}, {result.longitude}) {result.label}"
            )
            return result

        logger.info(
            f"No geocoding result for {len(queries)} candidates: "
            + ", ".join(f"{kind.value}={count}" for kind, count in failures.items())
        )
        return None
