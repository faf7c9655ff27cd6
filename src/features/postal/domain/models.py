"""郵便番号検索のドメインモデル"""
from dataclasses import dataclass


@dataclass(frozen=True)
class PostalAddress:
    """郵便番号に対応する住所"""

    postal_code: str  # NNN-NNNN
    prefecture: str  # 都道府県
    city_town: str  # 市区町村 + 町域

    def __repr__(self) -> str:
        return f"PostalAddress({self.postal_code} {self.prefecture}{self.city_town})"
