"""アプリケーション設定（Pydantic Settings）"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """アプリケーション設定"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Project
    project_name: str = Field(
        default="fab-store-locator",
        description="プロジェクト名",
    )
    environment: str = Field(
        default="development",
        description="環境 (development, staging, production)",
    )

    # GCP
    gcp_project_id: str = Field(
        ...,
        description="GCPプロジェクトID",
    )

    # Firestore
    firestore_database_id: str = Field(
        default="(default)",
        description="FirestoreデータベースID",
    )
    firestore_stores_collection: str = Field(
        default="stores",
        description="店舗コレクション名",
    )

    # Geocoding providers
    gsi_endpoint: str = Field(
        default="https://msearch.gsi.go.jp/address-search/AddressSearch",
        description="国土地理院 住所検索APIのURL（一次プロバイダー）",
    )
    nominatim_endpoint: str = Field(
        default="https://nominatim.openstreetmap.org/search",
        description="Nominatim検索APIのURL（二次プロバイダー）",
    )
    nominatim_user_agent: str = Field(
        default="fab-store-locator/1.0 (store address geocoding; low request rate)",
        description="Nominatimに送るクライアント識別用User-Agent",
    )
    nominatim_accept_language: str = Field(
        default="ja",
        description="Nominatimの言語ヒント",
    )
    nominatim_requests_per_second: float = Field(
        default=1.0,
        description="Nominatimのレート制限（リクエスト/秒）",
    )
    geocoding_timeout: float = Field(
        default=5.0,
        description="ジオコーディング1リクエストあたりのタイムアウト（秒）",
    )
    geocoding_max_retries: int = Field(
        default=1,
        description="ジオコーディングのリトライ回数",
    )
    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="Google Maps API Key（設定時のみ三次プロバイダーとして使用）",
    )
    google_maps_api_key_secret_name: Optional[str] = Field(
        default=None,
        description="Google Maps API KeyのSecret Manager名",
    )

    # Postal code lookup
    zipcloud_endpoint: str = Field(
        default="https://zipcloud.ibsnet.co.jp/api/search",
        description="郵便番号検索APIのURL",
    )
    postal_autofill_enabled: bool = Field(
        default=True,
        description="投稿時に郵便番号から市区町村を補完するか",
    )

    # Admin
    admin_password: Optional[str] = Field(
        default=None,
        description="管理者共有パスワード（ローカル開発用）",
    )
    admin_password_secret_name: str = Field(
        default="admin-password",
        description="管理者パスワードのSecret Manager名",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    gcp_logging_enabled: bool = Field(
        default=False,
        description="Cloud Loggingを有効にするか",
    )

    # Cloud Run
    port: int = Field(
        default=8080,
        description="HTTPサーバーのポート番号",
    )

    @property
    def is_production(self) -> bool:
        """本番環境かどうか"""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """開発環境かどうか"""
        return self.environment.lower() == "development"
