"""座標解決ポリシー（自動解決・承認時再解決・手動指定の優先順位）"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ....shared.logging.config import get_logger
from ....shared.utils.datetime_utils import now_jst
from ...stores.domain.models import Store
from ..domain.enums import ResolutionState
from ..domain.models import (
    SENTINEL_COORDINATE,
    AddressInput,
    Coordinate,
    GeocodeResult,
)
from .geocoding_service import GeocodingService

logger = get_logger(__name__)


class FailureAction(str, Enum):
    """自動解決に失敗したときの扱い"""

    REQUIRE_CONFIRMATION = "require_confirmation"  # センチネルのまま保存するか確認を求める
    MANUAL_OVERRIDE = "manual_override"  # 地図での手動指定に誘導する


class ResolutionOutcome(str, Enum):
    """解決処理の結果"""

    RESOLVED = "resolved"  # 自動解決した
    ALREADY_RESOLVED = "already_resolved"  # 自動解決済みのため何もしない
    SKIPPED_MANUAL_OVERRIDE = "skipped_manual_override"  # 手動指定を優先
    KEPT_PREVIOUS = "kept_previous"  # 再解決に失敗し、以前の自動解決座標を維持
    NEEDS_CONFIRMATION = "needs_confirmation"  # センチネル保存の確認待ち
    NEEDS_MANUAL_OVERRIDE = "needs_manual_override"  # 手動指定待ち
    CONFIRMED_UNRESOLVED = "confirmed_unresolved"  # 確認済みで未解決のまま保存
    CANCELLED = "cancelled"  # 中断（店舗は変更しない）


BLOCKING_OUTCOMES = frozenset(
    {ResolutionOutcome.NEEDS_CONFIRMATION, ResolutionOutcome.NEEDS_MANUAL_OVERRIDE}
)


@dataclass(frozen=True)
class ResolutionReport:
    """解決処理の報告"""

    outcome: ResolutionOutcome
    result: Optional[GeocodeResult] = None

    @property
    def is_blocking(self) -> bool:
        """保存・承認を進めてはいけない結果か"""
        return self.outcome in BLOCKING_OUTCOMES


def is_unresolved(coordinate: Coordinate) -> bool:
    """センチネル座標（許容誤差内）なら未解決"""
    return coordinate.is_sentinel()


def apply_geocode_result(store: Store, result: GeocodeResult) -> None:
    """自動解決の結果を店舗に反映"""
    store.latitude = result.latitude
    store.longitude = result.longitude
    store.resolution_state = ResolutionState.AUTO_RESOLVED
    store.geocode_label = result.label
    store.geocode_provider = result.provider
    store.resolved_at = now_jst()


def reset_to_unresolved(store: Store) -> None:
    """座標をセンチネルに戻し、未解決状態にする"""
    store.latitude = SENTINEL_COORDINATE.latitude
    store.longitude = SENTINEL_COORDINATE.longitude
    store.resolution_state = ResolutionState.UNRESOLVED
    store.geocode_label = None
    store.geocode_provider = None
    store.resolved_at = None


class ResolutionPolicy:
    """
    店舗座標の状態遷移を管理する

    Unresolved → (自動解決) → AutoResolved → (承認時再解決) → AutoResolved
    任意の状態 → (手動指定) → ManualOverride
    住所変更 → Unresolved

    ManualOverride は住所が変更されない限り自動解決で上書きしない。
    チェーンの結果は処理完了後にまとめて反映し、中断時は何も変更しない。
    """

    def __init__(self, geocoding_service: GeocodingService) -> None:
        """
        Args:
            geocoding_service: ジオコーディングサービス
        """
        self.geocoding_service = geocoding_service

    def needs_auto_resolution(self, store: Store) -> bool:
        """投稿時に自動解決を試みるべきか"""
        if store.resolution_state == ResolutionState.MANUAL_OVERRIDE:
            return False
        if not store.address.prefecture:
            return False
        return store.is_unresolved or store.resolution_state == ResolutionState.UNRESOLVED

    def resolve_on_submit(
        self,
        store: Store,
        on_failure: FailureAction = FailureAction.REQUIRE_CONFIRMATION,
        confirmed: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> ResolutionReport:
        """
        投稿時の自動解決

        Args:
            store: 対象店舗
            on_failure: 解決失敗時の扱い
            confirmed: センチネル座標のまま保存することを確認済みか
            cancel_event: 中断用イベント

        Returns:
            ResolutionReport: 結果
        """
        if store.resolution_state == ResolutionState.MANUAL_OVERRIDE:
            return ResolutionReport(ResolutionOutcome.SKIPPED_MANUAL_OVERRIDE)

        if not self.needs_auto_resolution(store):
            return ResolutionReport(ResolutionOutcome.ALREADY_RESOLVED)

        result = self.geocoding_service.resolve_address(store.address, cancel_event=cancel_event)
        if cancel_event is not None and cancel_event.is_set():
            return ResolutionReport(ResolutionOutcome.CANCELLED)

        if result is not None:
            apply_geocode_result(store, result)
            logger.info(f"Store {store.store_id} auto-resolved via {result.provider.value}")
            return ResolutionReport(ResolutionOutcome.RESOLVED, result)

        return self._handle_failure(store, on_failure, confirmed)

    def resolve_on_approval(
        self,
        store: Store,
        confirmed: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> ResolutionReport:
        """
        承認時の再解決

        最新の住所で再度ジオコーディングし、自動解決座標を上書きする。
        手動指定された座標は上書きしない。

        Args:
            store: 対象店舗
            confirmed: 未解決のまま承認することを確認済みか
            cancel_event: 中断用イベント

        Returns:
            ResolutionReport: 結果
        """
        if store.resolution_state == ResolutionState.MANUAL_OVERRIDE:
            logger.info(f"Store {store.store_id} has a manual location; skipping re-resolution")
            return ResolutionReport(ResolutionOutcome.SKIPPED_MANUAL_OVERRIDE)

        result = self.geocoding_service.resolve_address(store.address, cancel_event=cancel_event)
        if cancel_event is not None and cancel_event.is_set():
            return ResolutionReport(ResolutionOutcome.CANCELLED)

        if result is not None:
            apply_geocode_result(store, result)
            logger.info(f"Store {store.store_id} re-resolved on approval via {result.provider.value}")
            return ResolutionReport(ResolutionOutcome.RESOLVED, result)

        if store.resolution_state == ResolutionState.AUTO_RESOLVED and not store.is_unresolved:
            logger.warning(
                f"Re-resolution failed for store {store.store_id}; keeping previous coordinates"
            )
            return ResolutionReport(ResolutionOutcome.KEPT_PREVIOUS)

        return self._handle_failure(store, FailureAction.REQUIRE_CONFIRMATION, confirmed)

    def on_address_changed(self, store: Store, new_address: AddressInput) -> bool:
        """
        住所の更新を反映

        ジオコーディングに影響するフィールドが変わった場合は
        手動指定を含めて未解決状態に戻す

        Returns:
            bool: 未解決状態に戻した場合True
        """
        changed = new_address.geocoding_fields() != store.address.geocoding_fields()
        store.address = new_address

        if not changed:
            return False

        reset_to_unresolved(store)
        logger.info(f"Address changed for store {store.store_id}; demoted to unresolved")
        return True

    def _handle_failure(
        self,
        store: Store,
        on_failure: FailureAction,
        confirmed: bool,
    ) -> ResolutionReport:
        if confirmed:
            reset_to_unresolved(store)
            logger.warning(
                f"Store {store.store_id} saved without coordinates (confirmed by caller)"
            )
            return ResolutionReport(ResolutionOutcome.CONFIRMED_UNRESOLVED)

        if on_failure == FailureAction.MANUAL_OVERRIDE:
            return ResolutionReport(ResolutionOutcome.NEEDS_MANUAL_OVERRIDE)
        return ResolutionReport(ResolutionOutcome.NEEDS_CONFIRMATION)
