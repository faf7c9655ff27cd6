"""カスタム例外定義"""


class StoreLocatorError(Exception):
    """ストアロケーター基底例外"""

    pass


class HTTPError(StoreLocatorError):
    """HTTP関連のエラー"""

    pass


class GeocodingError(StoreLocatorError):
    """ジオコーディングエラー"""

    pass


class NetworkFailureError(GeocodingError):
    """プロバイダーに到達できない（接続失敗・タイムアウト・非2xx）"""

    pass


class MalformedResponseError(GeocodingError):
    """プロバイダーのレスポンスを解釈できない"""

    pass


class StorageError(StoreLocatorError):
    """ストレージ関連のエラー"""

    pass


class StoreNotFoundError(StorageError):
    """店舗が存在しない"""

    pass


class ConfigurationError(StoreLocatorError):
    """設定エラー"""

    pass


class ValidationError(StoreLocatorError):
    """バリデーションエラー"""

    pass
