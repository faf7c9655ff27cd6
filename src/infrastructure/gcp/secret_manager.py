"""GCP Secret Manager連携（管理者パスワード・APIキー）"""
from typing import Optional

from google.cloud import secretmanager

from ...shared.exceptions.errors import ConfigurationError
from ...shared.logging.config import get_logger

logger = get_logger(__name__)


class SecretManagerClient:
    """Secret Managerクライアント"""

    def __init__(
        self,
        project_id: str,
        client: Optional[secretmanager.SecretManagerServiceClient] = None,
    ):
        """
        Args:
            project_id: GCPプロジェクトID
            client: Secret Managerクライアント（テスト用に差し替え可能）
        """
        self.project_id = project_id
        self.client = client or secretmanager.SecretManagerServiceClient()

    def get_secret(self, secret_name: str, version: str = "latest") -> str:
        """
        シークレットの値を取得

        Raises:
            ConfigurationError: シークレット取得失敗時
        """
        name = f"projects/{self.project_id}/secrets/{secret_name}/versions/{version}"
        try:
            response = self.client.access_secret_version(request={"name": name})
        except Exception as e:
            raise ConfigurationError(f"Failed to fetch secret {secret_name}: {e}") from e

        logger.info(f"Fetched secret: {secret_name}")
        return response.payload.data.decode("UTF-8").strip()


def resolve_secret(
    local_value: Optional[str],
    secret_name: Optional[str],
    secret_manager: Optional[SecretManagerClient],
) -> Optional[str]:
    """
    ローカル設定値を優先し、なければSecret Managerから取得

    Args:
        local_value: 環境変数などで直接設定された値
        secret_name: Secret Manager上の名前
        secret_manager: Secret Managerクライアント（開発環境ではNone）

    Returns:
        Optional[str]: 値（どちらにもない場合はNone）
    """
    if local_value:
        return local_value
    if not secret_name or secret_manager is None:
        return None

    try:
        return secret_manager.get_secret(secret_name)
    except ConfigurationError as e:
        logger.warning(f"Secret {secret_name} unavailable: {e}")
        return None
