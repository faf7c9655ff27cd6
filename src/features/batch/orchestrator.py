"""サービスオーケストレーター"""

from typing import Optional

from ...infrastructure.config.settings import Settings
from ...infrastructure.gcp.secret_manager import SecretManagerClient, resolve_secret
from ...shared.http.client import HTTPClient
from ...shared.http.rate_limiter import RateLimiter
from ...shared.logging.config import get_logger
from ..geocoding.providers.base import AbstractGeocoder
from ..geocoding.providers.gsi_geocoder import GsiGeocoder
from ..geocoding.providers.nominatim_geocoder import NominatimGeocoder
from ..geocoding.services.geocoding_chain import GeocodingChain
from ..geocoding.services.geocoding_service import GeocodingService
from ..geocoding.services.resolution_policy import ResolutionPolicy
from ..postal.providers.zipcloud_client import ZipcloudClient
from ..storage.clients.firestore_client import FirestoreClient
from ..storage.repositories.store_repository import StoreRepository
from ..stores.services.admin_gate import AdminGate
from ..stores.services.submission_service import SubmissionService

logger = get_logger(__name__)


class Orchestrator:
    """
    オーケストレーター

    各Featureを統合し、依存性注入を行う
    """

    def __init__(self, settings: Settings, with_storage: bool = True) -> None:
        """
        Args:
            settings: アプリケーション設定
            with_storage: Firestoreを初期化するか（住所解決のみのCLIではFalse）
        """
        self.settings = settings

        # Secret Managerクライアントを初期化
        self.secret_manager: Optional[SecretManagerClient] = None
        if not settings.is_development:
            self.secret_manager = SecretManagerClient(settings.gcp_project_id)

        # ジオコーディング用HTTPクライアント（短いタイムアウト）
        self.http_client = HTTPClient(
            timeout=settings.geocoding_timeout,
            max_retries=settings.geocoding_max_retries,
        )

        self.geocoding_service = GeocodingService(GeocodingChain(self._create_providers()))
        self.resolution_policy = ResolutionPolicy(self.geocoding_service)
        self.postal_client = ZipcloudClient(
            endpoint=settings.zipcloud_endpoint, http_client=self.http_client
        )

        self.store_repository: Optional[StoreRepository] = None
        self.submission_service: Optional[SubmissionService] = None
        if with_storage:
            firestore_client = FirestoreClient(
                project_id=settings.gcp_project_id,
                database_id=settings.firestore_database_id,
            )
            self.store_repository = StoreRepository(
                firestore_client, collection_name=settings.firestore_stores_collection
            )
            self.submission_service = SubmissionService(
                self.store_repository,
                self.resolution_policy,
                postal_client=self.postal_client if settings.postal_autofill_enabled else None,
            )

        self.admin_gate = AdminGate(
            resolve_secret(
                settings.admin_password,
                settings.admin_password_secret_name,
                self.secret_manager,
            )
        )

        logger.info("Orchestrator initialized")

    def _create_providers(self) -> list[AbstractGeocoder]:
        """
        プロバイダーを優先順に生成

        国土地理院 → Nominatim（→ Google Maps、APIキーがある場合のみ）
        """
        providers: list[AbstractGeocoder] = [
            GsiGeocoder(endpoint=self.settings.gsi_endpoint, http_client=self.http_client),
            NominatimGeocoder(
                endpoint=self.settings.nominatim_endpoint,
                user_agent=self.settings.nominatim_user_agent,
                accept_language=self.settings.nominatim_accept_language,
                http_client=self.http_client,
                rate_limiter=RateLimiter(
                    requests_per_second=self.settings.nominatim_requests_per_second
                ),
            ),
        ]

        api_key = resolve_secret(
            self.settings.google_maps_api_key,
            self.settings.google_maps_api_key_secret_name,
            self.secret_manager,
        )
        if api_key:
            from ..geocoding.providers.google_maps_geocoder import GoogleMapsGeocoder

            providers.append(
                GoogleMapsGeocoder(api_key=api_key, timeout=self.settings.geocoding_timeout)
            )
        else:
            logger.info("Google Maps API key not configured; using GSI and Nominatim only")

        return providers

    def require_submission_service(self) -> SubmissionService:
        """ストレージ付きで初期化されている場合のみ投稿サービスを返す"""
        if self.submission_service is None:
            raise RuntimeError("Orchestrator was created without storage")
        return self.submission_service

    def run_revalidation(self, show_progress: bool = True) -> dict[str, int]:
        """承認待ち店舗の座標を一括再解決"""
        return self.require_submission_service().revalidate_pending(show_progress=show_progress)
