"""HTTPサーバーのテスト"""

import os
from typing import Callable, Iterator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("GCP_PROJECT_ID", "test-project")

from src.features.geocoding.domain.models import GeocodeResult  # noqa: E402
from src.features.geocoding.services.resolution_policy import (  # noqa: E402
    FailureAction,
    ResolutionOutcome,
    ResolutionReport,
)
from src.features.postal.domain.models import PostalAddress  # noqa: E402
from src.features.stores.domain.models import Store  # noqa: E402
from src.features.stores.services.admin_gate import AdminGate  # noqa: E402
from src.features.stores.services.submission_service import (  # noqa: E402
    SubmissionResult,
    SubmissionService,
)
from src.server import app, get_orchestrator  # noqa: E402
from src.shared.exceptions.errors import StoreNotFoundError  # noqa: E402

ADMIN_HEADERS = {"X-Admin-Password": "secret"}

ADDRESS = {
    "prefecture": "東京都",
    "postal_code": "101-0021",
    "city_town": "千代田区外神田",
    "street": "1-6-3",
}


@pytest.fixture
def submission_service() -> MagicMock:
    return MagicMock(spec=SubmissionService)


@pytest.fixture
def orchestrator(submission_service: MagicMock) -> MagicMock:
    orchestrator = MagicMock()
    orchestrator.admin_gate = AdminGate("secret")
    orchestrator.require_submission_service.return_value = submission_service
    orchestrator.geocoding_service.resolve_address.return_value = None
    orchestrator.postal_client.lookup.return_value = None
    return orchestrator


@pytest.fixture
def client(orchestrator: MagicMock) -> Iterator[TestClient]:
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client: TestClient) -> None:
    """ヘルスチェック"""
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_geocode_returns_result(
    client: TestClient, orchestrator: MagicMock, gsi_result: GeocodeResult
) -> None:
    """解決結果を返す"""
    orchestrator.geocoding_service.resolve_address.return_value = gsi_result

    response = client.post("/geocode", json=ADDRESS)

    assert response.status_code == 200
    assert response.json()["result"] == {
        "latitude": 35.6984,
        "longitude": 139.7709,
        "label": "東京都千代田区外神田一丁目",
        "provider": "gsi",
    }
    address = orchestrator.geocoding_service.resolve_address.call_args.args[0]
    assert address.street == "1-6-3"


def test_geocode_no_result_is_not_an_error(client: TestClient) -> None:
    """見つからない場合もエラーにしない"""
    response = client.post("/geocode", json=ADDRESS)

    assert response.status_code == 200
    assert response.json() == {"result": None}


def test_geocode_invalid_prefecture(client: TestClient) -> None:
    """都道府県が不正なら422"""
    response = client.post("/geocode", json={**ADDRESS, "prefecture": "東京"})

    assert response.status_code == 422


def test_postal_lookup(client: TestClient, orchestrator: MagicMock) -> None:
    """郵便番号検索"""
    orchestrator.postal_client.lookup.return_value = PostalAddress(
        postal_code="101-0021", prefecture="東京都", city_town="千代田区外神田"
    )

    response = client.get("/postal/1010021")

    assert response.status_code == 200
    assert response.json()["city_town"] == "千代田区外神田"


def test_postal_lookup_not_found(client: TestClient) -> None:
    """該当なしは404"""
    assert client.get("/postal/0000000").status_code == 404


def test_submit_store_created(
    client: TestClient, submission_service: MagicMock, make_store: Callable[..., Store]
) -> None:
    """保存できた投稿は201"""
    submission_service.submit.return_value = SubmissionResult(
        store=make_store(), report=ResolutionReport(ResolutionOutcome.RESOLVED), saved=True
    )

    response = client.post(
        "/stores",
        json={"name": "カードショップ秋葉原", "address": ADDRESS, "on_failure": "manual_override"},
    )

    assert response.status_code == 201
    assert response.json()["outcome"] == "resolved"
    draft = submission_service.submit.call_args.args[0]
    assert draft.name == "カードショップ秋葉原"
    assert draft.pin is None
    assert submission_service.submit.call_args.kwargs["on_failure"] == FailureAction.MANUAL_OVERRIDE


def test_submit_store_needs_confirmation(
    client: TestClient, submission_service: MagicMock, make_store: Callable[..., Store]
) -> None:
    """確認待ちの投稿は409"""
    submission_service.submit.return_value = SubmissionResult(
        store=make_store(),
        report=ResolutionReport(ResolutionOutcome.NEEDS_CONFIRMATION),
        saved=False,
    )

    response = client.post("/stores", json={"name": "カードショップ秋葉原", "address": ADDRESS})

    assert response.status_code == 409
    body = response.json()
    assert body["saved"] is False
    assert body["outcome"] == "needs_confirmation"
    assert body["store"]["resolution_state"] == "unresolved"


def test_submit_store_with_pin(
    client: TestClient, submission_service: MagicMock, manual_store: Store
) -> None:
    """地図の地点をpinとして渡す"""
    submission_service.submit.return_value = SubmissionResult(
        store=manual_store,
        report=ResolutionReport(ResolutionOutcome.SKIPPED_MANUAL_OVERRIDE),
        saved=True,
    )

    response = client.post(
        "/stores",
        json={
            "name": "カードショップ秋葉原",
            "address": ADDRESS,
            "pin": {"latitude": 35.699, "longitude": 139.7712},
        },
    )

    assert response.status_code == 201
    draft = submission_service.submit.call_args.args[0]
    assert draft.pin.to_tuple() == (35.699, 139.7712)


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/stores/pending"),
        ("post", "/stores/store-1/approve"),
        ("delete", "/stores/store-1"),
    ],
)
def test_admin_endpoints_require_password(client: TestClient, method: str, path: str) -> None:
    """管理者パスワードがなければ401"""
    assert getattr(client, method)(path).status_code == 401
    assert getattr(client, method)(path, headers={"X-Admin-Password": "wrong"}).status_code == 401


def test_list_pending(
    client: TestClient, submission_service: MagicMock, make_store: Callable[..., Store]
) -> None:
    """承認待ち一覧"""
    submission_service.list_pending.return_value = [make_store()]

    response = client.get("/stores/pending", headers=ADMIN_HEADERS)

    assert response.status_code == 200
    assert [s["store_id"] for s in response.json()["stores"]] == ["store-1"]


def test_list_public_stores(
    client: TestClient, submission_service: MagicMock, auto_resolved_store: Store
) -> None:
    """公開一覧は管理者パスワードなしで取得できる"""
    submission_service.list_approved.return_value = [auto_resolved_store]

    response = client.get("/stores", params={"prefecture": "東京都", "q": "秋葉原"})

    assert response.status_code == 200
    assert [s["store_id"] for s in response.json()["stores"]] == ["store-1"]
    submission_service.list_approved.assert_called_once_with(
        prefecture="東京都", keyword="秋葉原"
    )


def test_list_public_stores_without_filters(
    client: TestClient, submission_service: MagicMock
) -> None:
    """絞り込みなしは全件"""
    submission_service.list_approved.return_value = []

    response = client.get("/stores")

    assert response.json() == {"stores": []}
    submission_service.list_approved.assert_called_once_with(prefecture=None, keyword=None)


def test_approve_store(
    client: TestClient, submission_service: MagicMock, auto_resolved_store: Store
) -> None:
    """承認"""
    submission_service.approve.return_value = SubmissionResult(
        store=auto_resolved_store,
        report=ResolutionReport(ResolutionOutcome.KEPT_PREVIOUS),
        saved=True,
    )

    response = client.post("/stores/store-1/approve", headers=ADMIN_HEADERS)

    assert response.status_code == 200
    assert response.json()["outcome"] == "kept_previous"
    submission_service.approve.assert_called_once_with("store-1", confirmed=False)


def test_approve_missing_store(client: TestClient, submission_service: MagicMock) -> None:
    """存在しない店舗は404"""
    submission_service.approve.side_effect = StoreNotFoundError("Store not found: missing")

    response = client.post("/stores/missing/approve", headers=ADMIN_HEADERS)

    assert response.status_code == 404


def test_reject_store(client: TestClient, submission_service: MagicMock) -> None:
    """却下"""
    response = client.delete("/stores/store-1", headers=ADMIN_HEADERS)

    assert response.status_code == 200
    submission_service.reject.assert_called_once_with("store-1")


def test_set_store_location_out_of_range(client: TestClient) -> None:
    """範囲外の地点は422"""
    response = client.put(
        "/stores/store-1/location",
        json={"latitude": 120.0, "longitude": 139.0},
        headers=ADMIN_HEADERS,
    )

    assert response.status_code == 422


@pytest.mark.parametrize("password,status", [("secret", 200), ("wrong", 401)])
def test_admin_login(client: TestClient, password: str, status: int) -> None:
    """管理者ログイン"""
    response = client.post("/admin/login", json={"password": password})

    assert response.status_code == status


def test_admin_login_not_configured(client: TestClient, orchestrator: MagicMock) -> None:
    """パスワード未設定は500"""
    orchestrator.admin_gate = AdminGate(None)

    assert client.post("/admin/login", json={"password": "anything"}).status_code == 500
