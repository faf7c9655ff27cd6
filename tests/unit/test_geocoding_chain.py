"""ジオコーディングチェーンのテスト"""

import threading
from unittest.mock import MagicMock

import pytest

from src.features.geocoding.domain.enums import GeocodeProvider
from src.features.geocoding.domain.models import AddressInput, GeocodeResult
from src.features.geocoding.services.geocoding_chain import GeocodingChain
from src.features.geocoding.services.geocoding_service import GeocodingService
from src.shared.exceptions.errors import MalformedResponseError, NetworkFailureError

QUERIES = [
    "101-0021",
    "東京都 千代田区外神田 1-6-3",
    "東京都 千代田区外神田",
]

NOMINATIM_RESULT = GeocodeResult(
    latitude=35.6990,
    longitude=139.7710,
    label="外神田, 千代田区, 東京都",
    provider=GeocodeProvider.NOMINATIM,
)


def test_chain_requires_provider() -> None:
    """プロバイダーなしでは生成できない"""
    with pytest.raises(ValueError):
        GeocodingChain([])


def test_primary_hit_short_circuits(fake_geocoder, gsi_result: GeocodeResult) -> None:
    """一次プロバイダーがヒットしたら二次には問い合わせない"""
    primary = fake_geocoder(GeocodeProvider.GSI, {QUERIES[1]: gsi_result})
    secondary = fake_geocoder(GeocodeProvider.NOMINATIM, {QUERIES[1]: NOMINATIM_RESULT})

    result = GeocodingChain([primary, secondary]).resolve(QUERIES)

    assert result == gsi_result
    assert primary.calls == QUERIES[:2]
    assert secondary.calls == []


def test_secondary_used_after_primary_exhausted(fake_geocoder) -> None:
    """一次プロバイダーが全候補でヒットしない場合のみ二次に進む"""
    primary = fake_geocoder(GeocodeProvider.GSI)
    secondary = fake_geocoder(GeocodeProvider.NOMINATIM, {QUERIES[2]: NOMINATIM_RESULT})

    result = GeocodingChain([primary, secondary]).resolve(QUERIES)

    assert result == NOMINATIM_RESULT
    assert primary.calls == QUERIES
    assert secondary.calls == QUERIES


def test_secondary_receives_shaped_queries(fake_geocoder) -> None:
    """二次プロバイダーには整形後のクエリ列が渡る"""
    primary = fake_geocoder(GeocodeProvider.GSI)
    secondary = fake_geocoder(
        GeocodeProvider.NOMINATIM, shaper=lambda queries: list(reversed(queries))
    )

    GeocodingChain([primary, secondary]).resolve(QUERIES)

    assert secondary.calls == list(reversed(QUERIES))


def test_all_empty_returns_none(fake_geocoder) -> None:
    """全プロバイダー・全候補でヒットなしならNone（例外にしない）"""
    primary = fake_geocoder(GeocodeProvider.GSI)
    secondary = fake_geocoder(GeocodeProvider.NOMINATIM)

    assert GeocodingChain([primary, secondary]).resolve(QUERIES) is None


def test_failures_advance_to_next_candidate(fake_geocoder, gsi_result: GeocodeResult) -> None:
    """接続失敗・不正レスポンスは次の候補に進む"""
    primary = fake_geocoder(
        GeocodeProvider.GSI,
        {
            QUERIES[0]: NetworkFailureError("timeout"),
            QUERIES[1]: MalformedResponseError("not a list"),
            QUERIES[2]: gsi_result,
        },
    )

    assert GeocodingChain([primary]).resolve(QUERIES) == gsi_result
    assert primary.calls == QUERIES


def test_all_failures_return_none(fake_geocoder) -> None:
    """全候補が失敗してもNoneを返す"""
    primary = fake_geocoder(
        GeocodeProvider.GSI, {q: NetworkFailureError("down") for q in QUERIES}
    )

    assert GeocodingChain([primary]).resolve(QUERIES) is None


def test_empty_queries_return_none(fake_geocoder) -> None:
    """候補がなければ問い合わせない"""
    primary = fake_geocoder(GeocodeProvider.GSI)

    assert GeocodingChain([primary]).resolve([]) is None
    assert primary.calls == []


def test_cancelled_before_start(fake_geocoder, gsi_result: GeocodeResult) -> None:
    """中断済みなら問い合わせない"""
    primary = fake_geocoder(GeocodeProvider.GSI, {QUERIES[0]: gsi_result})
    cancel_event = threading.Event()
    cancel_event.set()

    assert GeocodingChain([primary]).resolve(QUERIES, cancel_event=cancel_event) is None
    assert primary.calls == []


def test_cancelled_during_request_discards_result(fake_geocoder, gsi_result: GeocodeResult) -> None:
    """応答待ちの間に中断されたら結果を捨てる"""
    cancel_event = threading.Event()
    primary = fake_geocoder(GeocodeProvider.GSI)

    def geocode_then_cancel(query: str) -> GeocodeResult:
        primary.calls.append(query)
        cancel_event.set()
        return gsi_result

    primary.geocode = geocode_then_cancel

    assert GeocodingChain([primary]).resolve(QUERIES, cancel_event=cancel_event) is None
    assert primary.calls == QUERIES[:1]


def test_iter_attempts_order(fake_geocoder) -> None:
    """プロバイダー順 → 候補順に試行する"""
    primary = fake_geocoder(GeocodeProvider.GSI)
    secondary = fake_geocoder(GeocodeProvider.NOMINATIM, shaper=lambda queries: queries[-1:])

    attempts = [
        (provider.name, query)
        for provider, query in GeocodingChain([primary, secondary]).iter_attempts(QUERIES)
    ]

    assert attempts == [
        ("gsi", QUERIES[0]),
        ("gsi", QUERIES[1]),
        ("gsi", QUERIES[2]),
        ("nominatim", QUERIES[2]),
    ]


def test_service_builds_queries_for_chain(
    akihabara_address: AddressInput, gsi_result: GeocodeResult
) -> None:
    """サービスは候補クエリを生成してチェーンに渡す"""
    chain = MagicMock(spec=GeocodingChain)
    chain.resolve.return_value = gsi_result

    result = GeocodingService(chain).resolve_address(akihabara_address)

    assert result == gsi_result
    queries = chain.resolve.call_args.args[0]
    assert queries[0] == "101-0021"
    assert queries[-1] == "東京都 千代田区外神田"
