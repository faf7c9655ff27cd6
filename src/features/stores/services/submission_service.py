"""投稿・審査ワークフロー"""

import threading
import time
from dataclasses import dataclass
from typing import Optional

from tqdm import tqdm

from ....shared.exceptions.errors import StoreNotFoundError, ValidationError
from ....shared.logging.config import get_logger
from ....shared.utils.datetime_utils import format_duration
from ....shared.utils.text import normalize_text
from ...geocoding.domain.enums import ResolutionState
from ...geocoding.domain.models import AddressInput
from ...geocoding.services.manual_override import apply_manual_override
from ...geocoding.services.resolution_policy import (
    FailureAction,
    ResolutionOutcome,
    ResolutionPolicy,
    ResolutionReport,
)
from ...postal.providers.zipcloud_client import ZipcloudClient
from ...postal.services.autofill import autofill_address
from ...storage.repositories.store_repository import StoreRepository
from ..domain.enums import StoreStatus
from ..domain.models import Store, StoreDraft, generate_store_id

logger = get_logger(__name__)


@dataclass
class SubmissionResult:
    """投稿・承認処理の結果"""

    store: Store
    report: ResolutionReport
    saved: bool  # 永続化したか（確認待ち・中断の場合はFalse）


class SubmissionService:
    """店舗投稿の受付・承認・却下"""

    def __init__(
        self,
        repository: StoreRepository,
        policy: ResolutionPolicy,
        postal_client: Optional[ZipcloudClient] = None,
    ) -> None:
        """
        Args:
            repository: 店舗リポジトリ
            policy: 座標解決ポリシー
            postal_client: 郵便番号検索クライアント（Noneの場合は自動入力しない）
        """
        self.repository = repository
        self.policy = policy
        self.postal_client = postal_client
        logger.info("SubmissionService initialized")

    def submit(
        self,
        draft: StoreDraft,
        on_failure: FailureAction = FailureAction.REQUIRE_CONFIRMATION,
        confirmed: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> SubmissionResult:
        """
        店舗を投稿（承認待ちとして保存）

        Args:
            draft: 投稿内容
            on_failure: 座標を解決できなかった場合の扱い
            confirmed: 座標未解決のまま保存することを確認済みか
            cancel_event: 中断用イベント

        Returns:
            SubmissionResult: 結果

        Raises:
            ValidationError: 店名が空の場合
        """
        name = normalize_text(draft.name)
        if not name:
            raise ValidationError("Store name is required")

        address = draft.address
        if self.postal_client is not None:
            address = autofill_address(address, self.postal_client)

        store = Store(
            store_id=generate_store_id(),
            name=name,
            address=address,
            fab_available=draft.fab_available,
            armory_available=draft.armory_available,
            format_text=normalize_text(draft.format_text),
            notes=draft.notes.strip() if draft.notes else None,
            author=normalize_text(draft.author),
        )

        if draft.pin is not None and not draft.pin.is_sentinel():
            apply_manual_override(store, draft.pin.latitude, draft.pin.longitude)
            report = ResolutionReport(ResolutionOutcome.SKIPPED_MANUAL_OVERRIDE)
        else:
            report = self.policy.resolve_on_submit(
                store, on_failure=on_failure, confirmed=confirmed, cancel_event=cancel_event
            )

        if report.is_blocking or report.outcome == ResolutionOutcome.CANCELLED:
            logger.info(f"Submission not saved: {name} ({report.outcome.value})")
            return SubmissionResult(store=store, report=report, saved=False)

        self.repository.save(store)
        logger.info(f"Store submitted: {store.store_id} - {name} ({report.outcome.value})")
        return SubmissionResult(store=store, report=report, saved=True)

    def approve(
        self,
        store_id: str,
        confirmed: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> SubmissionResult:
        """
        投稿を承認

        承認前に最新の住所で座標を再解決する（手動指定は維持）

        Args:
            store_id: 店舗ID
            confirmed: 座標未解決のまま承認することを確認済みか
            cancel_event: 中断用イベント

        Returns:
            SubmissionResult: 結果
        """
        store = self._get(store_id)
        report = self.policy.resolve_on_approval(
            store, confirmed=confirmed, cancel_event=cancel_event
        )

        if report.is_blocking or report.outcome == ResolutionOutcome.CANCELLED:
            logger.info(f"Approval not completed: {store_id} ({report.outcome.value})")
            return SubmissionResult(store=store, report=report, saved=False)

        store.status = StoreStatus.APPROVED
        self.repository.save(store)
        logger.info(f"Store approved: {store_id} - {store.name} ({report.outcome.value})")
        return SubmissionResult(store=store, report=report, saved=True)

    def reject(self, store_id: str) -> None:
        """投稿を却下（削除）"""
        self._get(store_id)
        self.repository.delete(store_id)
        logger.info(f"Store rejected: {store_id}")

    def update_address(self, store_id: str, address: AddressInput) -> Store:
        """
        住所を更新

        ジオコーディングに影響する項目が変わった場合は座標を未解決に戻す
        """
        store = self._get(store_id)
        self.policy.on_address_changed(store, address)
        self.repository.save(store)
        return store

    def set_manual_location(self, store_id: str, latitude: float, longitude: float) -> Store:
        """地図上で指定した地点を店舗の座標にする"""
        store = self._get(store_id)
        apply_manual_override(store, latitude, longitude)
        self.repository.save(store)
        return store

    def list_pending(self) -> list[Store]:
        """承認待ちの投稿を新しい順に取得"""
        return self.repository.list_by_status(StoreStatus.PENDING)

    def list_approved(
        self, prefecture: Optional[str] = None, keyword: Optional[str] = None
    ) -> list[Store]:
        """
        公開中（承認済み）の店舗を取得

        Args:
            prefecture: 都道府県で絞り込む（Noneの場合は全国）
            keyword: 店名の部分一致（大文字小文字を区別しない）

        Returns:
            list[Store]: 条件に合う店舗（新しい順）
        """
        stores = self.repository.list_by_status(StoreStatus.APPROVED)

        if prefecture:
            stores = [s for s in stores if s.address.prefecture == prefecture]

        keyword = normalize_text(keyword)
        if keyword:
            needle = keyword.lower()
            stores = [s for s in stores if needle in s.name.lower()]

        return stores

    def revalidate_pending(
        self,
        show_progress: bool = True,
        delay_between_requests: float = 0.0,
    ) -> dict[str, int]:
        """
        承認待ちの投稿の座標を一括で再解決

        手動指定された店舗はスキップする。解決できなかった店舗は変更しない。

        Args:
            show_progress: プログレスバーを表示するか
            delay_between_requests: 店舗間の待機時間（秒）

        Returns:
            dict[str, int]: 再解決結果（成功数、維持数、未解決数、スキップ数）
        """
        stores = self.list_pending()
        counts = {"resolved": 0, "kept": 0, "unresolved": 0, "skipped": 0, "total": len(stores)}
        started = time.monotonic()

        logger.info(f"Starting revalidation: {len(stores)} pending stores")

        iterator = tqdm(stores, desc="再ジオコーディング") if show_progress else stores

        for store in iterator:
            if store.resolution_state == ResolutionState.MANUAL_OVERRIDE:
                counts["skipped"] += 1
                continue

            report = self.policy.resolve_on_approval(store)

            if report.outcome == ResolutionOutcome.RESOLVED:
                self.repository.save(store)
                counts["resolved"] += 1
            elif report.outcome == ResolutionOutcome.KEPT_PREVIOUS:
                counts["kept"] += 1
            else:
                counts["unresolved"] += 1

            if delay_between_requests > 0:
                time.sleep(delay_between_requests)

        logger.info(
            f"Revalidation completed in {format_duration(time.monotonic() - started)}: "
            f"{counts['resolved']} resolved, {counts['kept']} kept, "
            f"{counts['unresolved']} unresolved, {counts['skipped']} skipped"
        )
        return counts

    def _get(self, store_id: str) -> Store:
        store = self.repository.get_by_id(store_id)
        if store is None:
            raise StoreNotFoundError(f"Store not found: {store_id}")
        return store
