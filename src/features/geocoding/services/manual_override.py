"""手動座標指定"""

from ....shared.exceptions.errors import ValidationError
from ....shared.logging.config import get_logger
from ....shared.utils.datetime_utils import now_jst
from ...stores.domain.models import Store
from ..domain.enums import GeocodeProvider, ResolutionState
from ..domain.models import Coordinate

logger = get_logger(__name__)

MANUAL_LABEL = "地図上で指定"


def apply_manual_override(store: Store, latitude: float, longitude: float) -> Coordinate:
    """
    地図上で指定された地点を店舗の座標として確定

    手動指定は自動解決より常に優先され、住所が変更されるまで
    自動解決で上書きされない

    Args:
        store: 対象店舗
        latitude: 緯度
        longitude: 経度

    Returns:
        Coordinate: 設定した座標

    Raises:
        ValidationError: 範囲外、またはセンチネル座標のままの場合
    """
    coordinate = Coordinate(latitude, longitude)

    if coordinate.is_sentinel():
        raise ValidationError("Manual location must be moved away from the default point")

    store.latitude = coordinate.latitude
    store.longitude = coordinate.longitude
    store.resolution_state = ResolutionState.MANUAL_OVERRIDE
    store.geocode_label = MANUAL_LABEL
    store.geocode_provider = GeocodeProvider.MANUAL
    store.resolved_at = now_jst()

    logger.info(
        f"Manual location set for store {store.store_id}: ({latitude}, {longitude})"
    )
    return coordinate
