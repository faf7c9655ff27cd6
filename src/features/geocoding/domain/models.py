"""ジオコーディング機能のドメインモデル"""
from dataclasses import dataclass
from typing import Any, Optional

from ....shared.exceptions.errors import ValidationError
from ..normalization.normalizer import format_postal_code, to_halfwidth
from .enums import GeocodeProvider, PrefectureCode

# 未解決を表すセンチネル座標（東京駅）
SENTINEL_LATITUDE = 35.681
SENTINEL_LONGITUDE = 139.767
SENTINEL_EPSILON = 1e-4


def validate_lat_lng(latitude: float, longitude: float) -> None:
    """
    緯度・経度の範囲チェック

    Raises:
        ValidationError: 範囲外またはNaNの場合
    """
    if not -90.0 <= latitude <= 90.0:
        raise ValidationError(f"Latitude out of range: {latitude}")
    if not -180.0 <= longitude <= 180.0:
        raise ValidationError(f"Longitude out of range: {longitude}")


@dataclass(frozen=True)
class AddressInput:
    """
    構造化された住所入力

    building_line は表示専用でジオコーディングには使用しない
    """

    prefecture: str  # 都道府県（47都道府県のいずれか）
    postal_code: Optional[str] = None  # 郵便番号（7桁、ハイフン任意）
    city_town: Optional[str] = None  # 市区町村・町域
    street: Optional[str] = None  # 丁目・番地・号
    building_line: Optional[str] = None  # 建物名・階数（表示専用）

    def __post_init__(self) -> None:
        prefecture = (self.prefecture or "").strip()
        try:
            PrefectureCode.from_name(prefecture)
        except ValueError as e:
            raise ValidationError(f"Unknown prefecture: {self.prefecture!r}") from e
        object.__setattr__(self, "prefecture", prefecture)

        if self.postal_code is not None and self.postal_code.strip():
            formatted = format_postal_code(self.postal_code)
            if formatted is None:
                raise ValidationError(f"Invalid postal code: {self.postal_code!r}")
            object.__setattr__(self, "postal_code", formatted)
        else:
            object.__setattr__(self, "postal_code", None)

        for field_name in ("city_town", "street", "building_line"):
            value = getattr(self, field_name)
            if value is not None:
                value = to_halfwidth(value).strip()
                object.__setattr__(self, field_name, value or None)

    def geocoding_fields(self) -> tuple[Optional[str], ...]:
        """ジオコーディングに影響するフィールド（変更検知用）"""
        return (self.postal_code, self.prefecture, self.city_town, self.street)

    def display_address(self) -> str:
        """表示用の住所文字列"""
        parts = [self.prefecture, self.city_town, self.street, self.building_line]
        return " ".join(p for p in parts if p)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AddressInput":
        """辞書から生成（未知のキーは無視）"""
        return cls(
            prefecture=data.get("prefecture") or "",
            postal_code=data.get("postal_code"),
            city_town=data.get("city_town"),
            street=data.get("street"),
            building_line=data.get("building_line"),
        )

    def to_dict(self) -> dict[str, Optional[str]]:
        return {
            "prefecture": self.prefecture,
            "postal_code": self.postal_code,
            "city_town": self.city_town,
            "street": self.street,
            "building_line": self.building_line,
        }


@dataclass(frozen=True)
class Coordinate:
    """店舗に保存される座標"""

    latitude: float  # 緯度
    longitude: float  # 経度

    def __post_init__(self) -> None:
        validate_lat_lng(self.latitude, self.longitude)

    def is_sentinel(self) -> bool:
        """センチネル座標（未解決）とみなせるか"""
        return (
            abs(self.latitude - SENTINEL_LATITUDE) < SENTINEL_EPSILON
            and abs(self.longitude - SENTINEL_LONGITUDE) < SENTINEL_EPSILON
        )

    def to_tuple(self) -> tuple[float, float]:
        """(緯度, 経度)のタプルとして返す"""
        return (self.latitude, self.longitude)


SENTINEL_COORDINATE = Coordinate(SENTINEL_LATITUDE, SENTINEL_LONGITUDE)


@dataclass(frozen=True)
class GeocodeResult:
    """
    ジオコーディング結果

    プロバイダーが1件以上ヒットした場合にのみ生成する
    """

    latitude: float  # 緯度
    longitude: float  # 経度
    label: str  # ヒットした地点の表示名
    provider: GeocodeProvider  # 結果を返したプロバイダー

    def __post_init__(self) -> None:
        validate_lat_lng(self.latitude, self.longitude)

    def __repr__(self) -> str:
        return (
            f"GeocodeResult(lat={self.latitude}, lng={self.longitude}, "
            f"provider={self.provider.value})"
        )

    def to_coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    def to_tuple(self) -> tuple[float, float]:
        """(緯度, 経度)のタプルとして返す"""
        return (self.latitude, self.longitude)
