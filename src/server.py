"""Cloud Run用HTTPサーバー（FastAPI）"""
from functools import lru_cache
from typing import Any, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .features.batch.orchestrator import Orchestrator
from .features.geocoding.domain.models import AddressInput, Coordinate
from .features.geocoding.services.resolution_policy import FailureAction
from .features.stores.domain.models import Store, StoreDraft
from .features.stores.services.submission_service import SubmissionResult
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import StoreNotFoundError, ValidationError
from .shared.logging.config import get_logger, setup_logging

# 設定を読み込み
settings = Settings()

# ロギングを設定
setup_logging(
    level=settings.log_level,
    enable_cloud_logging=settings.gcp_logging_enabled,
    project_id=settings.gcp_project_id,
)
logger = get_logger(__name__)

app = FastAPI(
    title="店舗マップ 住所解決サービス",
    description="投稿された店舗住所の座標解決と審査ワークフローを提供するAPI",
    version="1.0.0",
)


@lru_cache(maxsize=1)
def get_orchestrator() -> Orchestrator:
    """オーケストレーターを取得（初回呼び出し時に生成）"""
    return Orchestrator(settings)


def require_admin(
    x_admin_password: Optional[str] = Header(default=None),
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> None:
    """管理者パスワードを検証"""
    if not orchestrator.admin_gate.verify(x_admin_password):
        raise HTTPException(status_code=401, detail="Invalid admin password")


class AddressPayload(BaseModel):
    """住所入力"""

    prefecture: str
    postal_code: Optional[str] = None
    city_town: Optional[str] = None
    street: Optional[str] = None
    building_line: Optional[str] = None

    def to_address_input(self) -> AddressInput:
        return AddressInput(
            prefecture=self.prefecture,
            postal_code=self.postal_code,
            city_town=self.city_town,
            street=self.street,
            building_line=self.building_line,
        )


class PointPayload(BaseModel):
    """地図上の地点"""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class SubmissionPayload(BaseModel):
    """店舗投稿"""

    name: str
    address: AddressPayload
    pin: Optional[PointPayload] = None
    fab_available: bool = False
    armory_available: bool = False
    format_text: Optional[str] = None
    notes: Optional[str] = None
    author: Optional[str] = None
    on_failure: FailureAction = FailureAction.REQUIRE_CONFIRMATION
    confirmed: bool = False


class ApprovalPayload(BaseModel):
    """承認"""

    confirmed: bool = False


class LoginPayload(BaseModel):
    """管理者ログイン"""

    password: str


def store_to_response(store: Store) -> dict[str, Any]:
    """店舗をレスポンス用の辞書に変換"""
    return {
        "store_id": store.store_id,
        "name": store.name,
        "address": store.address.to_dict(),
        "latitude": store.latitude,
        "longitude": store.longitude,
        "resolution_state": store.resolution_state.value,
        "geocode_label": store.geocode_label,
        "geocode_provider": store.geocode_provider.value if store.geocode_provider else None,
        "status": store.status.value,
        "fab_available": store.fab_available,
        "armory_available": store.armory_available,
        "format_text": store.format_text,
        "notes": store.notes,
        "author": store.author,
    }


def submission_to_response(result: SubmissionResult, saved_status: int) -> JSONResponse:
    """投稿・承認結果をレスポンスに変換（確認待ちは409）"""
    return JSONResponse(
        status_code=saved_status if result.saved else 409,
        content={
            "saved": result.saved,
            "outcome": result.report.outcome.value,
            "store": store_to_response(result.store),
        },
    )


@app.on_event("startup")
async def startup_event() -> None:
    """起動時の処理"""
    logger.info("Application starting up")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Project: {settings.project_name}")


@app.get("/")
async def root() -> dict[str, Any]:
    """ルートエンドポイント"""
    return {
        "service": settings.project_name,
        "version": "1.0.0",
        "status": "running",
        "environment": settings.environment,
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """ヘルスチェックエンドポイント"""
    return {"status": "healthy"}


@app.post("/geocode")
def geocode(
    payload: AddressPayload, orchestrator: Orchestrator = Depends(get_orchestrator)
) -> dict[str, Any]:
    """住所を座標に解決（見つからない場合は result が null）"""
    result = orchestrator.geocoding_service.resolve_address(payload.to_address_input())
    if result is None:
        return {"result": None}
    return {
        "result": {
            "latitude": result.latitude,
            "longitude": result.longitude,
            "label": result.label,
            "provider": result.provider.value,
        }
    }


@app.get("/postal/{postal_code}")
def lookup_postal_code(
    postal_code: str, orchestrator: Orchestrator = Depends(get_orchestrator)
) -> dict[str, str]:
    """郵便番号から都道府県・市区町村を取得"""
    postal = orchestrator.postal_client.lookup(postal_code)
    if postal is None:
        raise HTTPException(status_code=404, detail="Postal code not found")
    return {
        "postal_code": postal.postal_code,
        "prefecture": postal.prefecture,
        "city_town": postal.city_town,
    }


@app.post("/stores")
def submit_store(
    payload: SubmissionPayload, orchestrator: Orchestrator = Depends(get_orchestrator)
) -> JSONResponse:
    """店舗を投稿"""
    draft = StoreDraft(
        name=payload.name,
        address=payload.address.to_address_input(),
        pin=Coordinate(payload.pin.latitude, payload.pin.longitude) if payload.pin else None,
        fab_available=payload.fab_available,
        armory_available=payload.armory_available,
        format_text=payload.format_text,
        notes=payload.notes,
        author=payload.author,
    )
    result = orchestrator.require_submission_service().submit(
        draft, on_failure=payload.on_failure, confirmed=payload.confirmed
    )
    return submission_to_response(result, saved_status=201)


@app.get("/stores")
def list_stores(
    prefecture: Optional[str] = None,
    q: Optional[str] = None,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """公開中の店舗一覧（都道府県・店名で絞り込み）"""
    stores = orchestrator.require_submission_service().list_approved(
        prefecture=prefecture, keyword=q
    )
    return {"stores": [store_to_response(s) for s in stores]}


@app.get("/stores/pending", dependencies=[Depends(require_admin)])
def list_pending_stores(
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """承認待ちの投稿一覧"""
    stores = orchestrator.require_submission_service().list_pending()
    return {"stores": [store_to_response(s) for s in stores]}


@app.post("/stores/{store_id}/approve", dependencies=[Depends(require_admin)])
def approve_store(
    store_id: str,
    payload: Optional[ApprovalPayload] = None,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """投稿を承認（座標を再解決）"""
    confirmed = payload.confirmed if payload else False
    result = orchestrator.require_submission_service().approve(store_id, confirmed=confirmed)
    return submission_to_response(result, saved_status=200)


@app.delete("/stores/{store_id}", dependencies=[Depends(require_admin)])
def reject_store(
    store_id: str, orchestrator: Orchestrator = Depends(get_orchestrator)
) -> dict[str, str]:
    """投稿を却下（削除）"""
    orchestrator.require_submission_service().reject(store_id)
    return {"store_id": store_id, "status": "rejected"}


@app.put("/stores/{store_id}/address", dependencies=[Depends(require_admin)])
def update_store_address(
    store_id: str,
    payload: AddressPayload,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """住所を更新（座標は未解決に戻る）"""
    store = orchestrator.require_submission_service().update_address(
        store_id, payload.to_address_input()
    )
    return store_to_response(store)


@app.put("/stores/{store_id}/location", dependencies=[Depends(require_admin)])
def set_store_location(
    store_id: str,
    payload: PointPayload,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """地図上で指定した地点を座標にする"""
    store = orchestrator.require_submission_service().set_manual_location(
        store_id, payload.latitude, payload.longitude
    )
    return store_to_response(store)


@app.post("/admin/login")
def admin_login(
    payload: LoginPayload, orchestrator: Orchestrator = Depends(get_orchestrator)
) -> dict[str, bool]:
    """管理者パスワードを照合"""
    if not orchestrator.admin_gate.is_configured:
        raise HTTPException(status_code=500, detail="Server configuration error")
    if not orchestrator.admin_gate.verify(payload.password):
        raise HTTPException(status_code=401, detail="パスワードが違います")
    return {"success": True}


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """入力エラー"""
    return JSONResponse(status_code=422, content={"message": "Invalid input", "detail": str(exc)})


@app.exception_handler(StoreNotFoundError)
async def not_found_exception_handler(request: Request, exc: StoreNotFoundError) -> JSONResponse:
    """店舗が存在しない"""
    return JSONResponse(status_code=404, content={"message": "Not found", "detail": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """グローバル例外ハンドラー"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    # 本番環境では内部エラーの詳細を返さない
    return JSONResponse(
        status_code=500,
        content={
            "message": "Internal server error",
            "detail": None if settings.is_production else str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
