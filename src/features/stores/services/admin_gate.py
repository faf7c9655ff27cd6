"""管理者用の共有パスワード照合"""

import hmac
from typing import Optional

from ....shared.logging.config import get_logger

logger = get_logger(__name__)


class AdminGate:
    """
    単一の共有シークレットによる管理者判定

    パスワード未設定の場合は常に拒否する
    """

    def __init__(self, password: Optional[str]) -> None:
        self._password = password
        if not password:
            logger.warning("Admin password is not configured; admin operations are disabled")

    @property
    def is_configured(self) -> bool:
        return bool(self._password)

    def verify(self, candidate: Optional[str]) -> bool:
        """パスワードが一致するか（定数時間比較）"""
        if not self._password or not candidate:
            return False
        return hmac.compare_digest(candidate.encode("utf-8"), self._password.encode("utf-8"))
