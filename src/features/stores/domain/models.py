"""店舗機能のドメインモデル"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ....shared.utils.datetime_utils import now_jst, to_jst
from ...geocoding.domain.enums import GeocodeProvider, ResolutionState
from ...geocoding.domain.models import (
    SENTINEL_LATITUDE,
    SENTINEL_LONGITUDE,
    AddressInput,
    Coordinate,
)
from .enums import StoreStatus


def generate_store_id() -> str:
    """店舗IDを生成"""
    return uuid.uuid4().hex


@dataclass
class Store:
    """
    店舗情報（Firestore保存用）

    座標は作成時点ではセンチネル（東京駅）で、
    resolution_state が座標の出所を表す
    """

    # ID
    store_id: str

    # 店舗基本情報（必須）
    name: str  # 店名
    address: AddressInput  # 住所

    # 位置情報
    latitude: float = SENTINEL_LATITUDE  # 緯度
    longitude: float = SENTINEL_LONGITUDE  # 経度
    resolution_state: ResolutionState = ResolutionState.UNRESOLVED
    geocode_label: Optional[str] = None  # ヒットした地点の表示名
    geocode_provider: Optional[GeocodeProvider] = None  # 座標の出所
    resolved_at: Optional[datetime] = None  # 座標確定日時

    # 審査
    status: StoreStatus = StoreStatus.PENDING

    # 店舗詳細情報（Optional）
    fab_available: bool = False  # FAB取扱あり
    armory_available: bool = False  # アーモリー開催あり
    format_text: Optional[str] = None  # フォーマット（自由記述）
    notes: Optional[str] = None  # 備考
    author: Optional[str] = None  # 投稿者名

    # メタデータ
    created_at: datetime = field(default_factory=now_jst)
    updated_at: datetime = field(default_factory=now_jst)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    @property
    def is_unresolved(self) -> bool:
        """座標がセンチネルのままか"""
        return self.coordinate.is_sentinel()

    def to_firestore_dict(self) -> dict[str, Any]:
        """Firestore保存用の辞書に変換"""
        return {
            "store_id": self.store_id,
            "name": self.name,
            **self.address.to_dict(),
            "latitude": self.latitude,
            "longitude": self.longitude,
            "resolution_state": self.resolution_state.value,
            "geocode_label": self.geocode_label,
            "geocode_provider": self.geocode_provider.value if self.geocode_provider else None,
            "resolved_at": self.resolved_at,
            "status": self.status.value,
            "fab_available": self.fab_available,
            "armory_available": self.armory_available,
            "format_text": self.format_text,
            "notes": self.notes,
            "author": self.author,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_firestore_dict(cls, data: dict[str, Any]) -> "Store":
        """
        Firestoreのデータから店舗オブジェクトを生成

        Firestoreの日時はUTCで返るため日本時間に揃える
        """
        provider = data.get("geocode_provider")
        resolved_at = data.get("resolved_at")
        return cls(
            store_id=data["store_id"],
            name=data["name"],
            address=AddressInput.from_dict(data),
            latitude=data.get("latitude", SENTINEL_LATITUDE),
            longitude=data.get("longitude", SENTINEL_LONGITUDE),
            resolution_state=ResolutionState(
                data.get("resolution_state", ResolutionState.UNRESOLVED.value)
            ),
            geocode_label=data.get("geocode_label"),
            geocode_provider=GeocodeProvider(provider) if provider else None,
            resolved_at=to_jst(resolved_at) if resolved_at else None,
            status=StoreStatus(data.get("status", StoreStatus.PENDING.value)),
            fab_available=data.get("fab_available", False),
            armory_available=data.get("armory_available", False),
            format_text=data.get("format_text"),
            notes=data.get("notes"),
            author=data.get("author"),
            created_at=to_jst(data["created_at"]) if data.get("created_at") else now_jst(),
            updated_at=to_jst(data["updated_at"]) if data.get("updated_at") else now_jst(),
        )


@dataclass
class StoreDraft:
    """
    投稿フォームの入力（ID・審査状態を持たない）

    pin は投稿前に地図をタップして指定した地点で、手動指定として扱う
    """

    name: str
    address: AddressInput
    pin: Optional[Coordinate] = None
    fab_available: bool = False
    armory_available: bool = False
    format_text: Optional[str] = None
    notes: Optional[str] = None
    author: Optional[str] = None
