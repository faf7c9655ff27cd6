"""ユニットテスト共通フィクスチャ"""

from typing import Any, Callable, Optional
from unittest.mock import MagicMock

import pytest

from src.features.geocoding.domain.enums import GeocodeProvider, ResolutionState
from src.features.geocoding.domain.models import AddressInput, GeocodeResult
from src.features.geocoding.providers.base import AbstractGeocoder
from src.features.geocoding.services.geocoding_service import GeocodingService
from src.features.stores.domain.models import Store


class FakeGeocoder(AbstractGeocoder):
    """クエリごとの応答を登録できるテスト用ジオコーダー"""

    def __init__(
        self,
        provider: GeocodeProvider,
        responses: Optional[dict[str, Any]] = None,
        shaper: Optional[Callable[[list[str]], list[str]]] = None,
    ) -> None:
        self.provider = provider
        self.responses = responses or {}
        self.shaper = shaper
        self.calls: list[str] = []
        super().__init__(http_client=MagicMock())

    def shape_queries(self, queries: list[str]) -> list[str]:
        return self.shaper(queries) if self.shaper else list(queries)

    def geocode(self, query: str) -> Optional[GeocodeResult]:
        self.calls.append(query)
        outcome = self.responses.get(query)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def fake_geocoder() -> type[FakeGeocoder]:
    return FakeGeocoder


@pytest.fixture
def akihabara_address() -> AddressInput:
    return AddressInput(
        postal_code="101-0021",
        prefecture="東京都",
        city_town="千代田区外神田",
        street="1-6-3",
    )


@pytest.fixture
def gsi_result() -> GeocodeResult:
    return GeocodeResult(
        latitude=35.6984,
        longitude=139.7709,
        label="東京都千代田区外神田一丁目",
        provider=GeocodeProvider.GSI,
    )


@pytest.fixture
def geocoding_service() -> MagicMock:
    service = MagicMock(spec=GeocodingService)
    service.resolve_address.return_value = None
    return service


@pytest.fixture
def make_store(akihabara_address: AddressInput) -> Callable[..., Store]:
    def _make(**overrides: Any) -> Store:
        fields: dict[str, Any] = {
            "store_id": "store-1",
            "name": "カードショップ秋葉原",
            "address": akihabara_address,
        }
        fields.update(overrides)
        return Store(**fields)

    return _make


@pytest.fixture
def auto_resolved_store(make_store: Callable[..., Store]) -> Store:
    return make_store(
        latitude=35.7000,
        longitude=139.7700,
        resolution_state=ResolutionState.AUTO_RESOLVED,
        geocode_provider=GeocodeProvider.GSI,
    )


@pytest.fixture
def manual_store(make_store: Callable[..., Store]) -> Store:
    return make_store(
        latitude=35.6990,
        longitude=139.7712,
        resolution_state=ResolutionState.MANUAL_OVERRIDE,
        geocode_provider=GeocodeProvider.MANUAL,
    )
