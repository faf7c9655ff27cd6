"""店舗リポジトリ"""
from typing import Optional

from ....shared.exceptions.errors import StorageError, ValidationError
from ....shared.logging.config import get_logger
from ....shared.utils.datetime_utils import now_jst
from ...stores.domain.enums import StoreStatus
from ...stores.domain.models import Store
from ..clients.firestore_client import FirestoreClient

logger = get_logger(__name__)


class StoreRepository:
    """店舗データのリポジトリ"""

    DEFAULT_COLLECTION = "stores"

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection_name: str = DEFAULT_COLLECTION,
    ) -> None:
        """
        StoreRepositoryを初期化

        Args:
            firestore_client: Firestoreクライアント
            collection_name: コレクション名
        """
        self.client = firestore_client
        self.collection_name = collection_name
        logger.info(f"StoreRepository initialized: collection={collection_name}")

    def save(self, store: Store) -> None:
        """
        店舗を保存（新規作成または置き換え）

        Args:
            store: 店舗オブジェクト

        Raises:
            ValidationError: バリデーションエラー
            StorageError: 保存に失敗した場合
        """
        self._validate_store(store)

        store.updated_at = now_jst()
        self.client.set_document(
            self.collection_name, store.store_id, store.to_firestore_dict()
        )
        logger.info(f"Store saved: {store.store_id} - {store.name} ({store.status.value})")

    def get_by_id(self, store_id: str) -> Optional[Store]:
        """
        店舗IDで店舗を取得

        Args:
            store_id: 店舗ID

        Returns:
            Optional[Store]: 店舗オブジェクト（存在しない場合はNone）
        """
        doc_data = self.client.get_document(self.collection_name, store_id)
        if not doc_data:
            return None

        try:
            return Store.from_firestore_dict(doc_data)
        except (KeyError, ValueError, ValidationError) as e:
            raise StorageError(f"Corrupt store document {store_id}: {e}") from e

    def list_by_status(
        self, status: StoreStatus, limit: Optional[int] = None
    ) -> list[Store]:
        """
        ステータスで店舗を取得（新しい順）

        Args:
            status: 審査ステータス
            limit: 取得件数の上限

        Returns:
            list[Store]: 店舗オブジェクトのリスト
        """
        docs = self.client.query_documents(
            self.collection_name,
            filters=[("status", "==", status.value)],
            order_by="created_at",
            descending=True,
            limit=limit,
        )

        stores = []
        for doc in docs:
            try:
                stores.append(Store.from_firestore_dict(doc))
            except (KeyError, ValueError, ValidationError) as e:
                logger.warning(f"Skipping corrupt store document {doc.get('store_id')}: {e}")

        logger.info(f"Retrieved {len(stores)} stores with status {status.value}")
        return stores

    def delete(self, store_id: str) -> None:
        """
        店舗を削除（物理削除）

        Args:
            store_id: 店舗ID
        """
        self.client.delete_document(self.collection_name, store_id)
        logger.info(f"Store deleted: {store_id}")

    def _validate_store(self, store: Store) -> None:
        """
        店舗データのバリデーション

        Raises:
            ValidationError: バリデーションエラー
        """
        if not store.store_id:
            raise ValidationError("store_id is required")

        if not store.name:
            raise ValidationError("name is required")

        if not store.address.prefecture:
            raise ValidationError("prefecture is required")
