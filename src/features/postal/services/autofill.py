"""郵便番号による住所の自動入力"""

import dataclasses
from typing import Optional

from ....shared.logging.config import get_logger
from ...geocoding.domain.models import AddressInput
from ..domain.models import PostalAddress
from ..providers.zipcloud_client import ZipcloudClient

logger = get_logger(__name__)


def merge_postal_address(address: AddressInput, postal: PostalAddress) -> AddressInput:
    """
    郵便番号検索の結果で空欄のみを補完

    入力済みの市区町村は上書きしない。都道府県が食い違う場合は
    利用者の選択を優先し、市区町村も補完しない。
    """
    if postal.prefecture != address.prefecture:
        logger.info(
            f"Postal code {postal.postal_code} belongs to {postal.prefecture}, "
            f"not {address.prefecture}; keeping user input"
        )
        return address

    if address.city_town:
        return address

    return dataclasses.replace(address, city_town=postal.city_town)


def autofill_address(address: AddressInput, client: ZipcloudClient) -> AddressInput:
    """
    郵便番号から市区町村を補完した住所を返す（検索できない場合はそのまま）
    """
    if not address.postal_code:
        return address

    postal: Optional[PostalAddress] = client.lookup(address.postal_code)
    if postal is None:
        return address

    return merge_postal_address(address, postal)
