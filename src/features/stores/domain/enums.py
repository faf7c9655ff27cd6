"""店舗機能のEnum定義"""
from enum import Enum


class StoreStatus(str, Enum):
    """投稿の審査ステータス"""

    PENDING = "pending"  # 承認待ち
    APPROVED = "approved"  # 承認済み（地図に表示）
