"""ジオコーディング候補クエリの生成"""

import re
from typing import Iterable, Optional

from ..domain.models import AddressInput
from .normalizer import normalize

# 丁目-番-号（ハイフン表記・丁目表記の混在を許容）
RE_CORE_ADDRESS = re.compile(
    r"\d+(?:丁目|-)\d+(?:(?:番地|番|-)\d+号?)?(?:番地|番)?"
)
RE_DIGIT_HYPHEN_DIGIT = re.compile(r"(\d+)-(\d+)")
RE_CHOME_BETWEEN_DIGITS = re.compile(r"(?<=\d)(?:丁目|番地|番)(?=\d)")
RE_TRAILING_UNIT = re.compile(r"(?<=\d)(?:丁目|番地|番|号)")
RE_BLOCK_NUMBERS = re.compile(r"\d+(?:[-\d]|丁目|番地|番|号)*")
RE_POSTAL_ONLY = re.compile(r"\d{3}-\d{4}")
RE_WHITESPACE = re.compile(r"\s+")


def _join(*parts: Optional[str]) -> str:
    return " ".join(p for p in parts if p)


def dedupe_queries(queries: Iterable[str]) -> list[str]:
    """
    空白を正規化し、空のクエリを除いて順序を保ったまま重複を除去
    """
    seen: set[str] = set()
    result = []
    for query in queries:
        cleaned = RE_WHITESPACE.sub(" ", query).strip()
        if not cleaned or cleaned in seen:
            continue
        seen.add(cleaned)
        result.append(cleaned)
    return result


def is_postal_code_query(query: str) -> bool:
    """郵便番号のみのクエリか"""
    return RE_POSTAL_ONLY.fullmatch(query) is not None


def to_chome_notation(street: str) -> str:
    """
    最初の「数字-数字」を丁目表記に書き換える（例: 1-6-3 → 1丁目6-3）

    既に丁目表記を含む場合はそのまま返す
    """
    if "丁目" in street:
        return street
    return RE_DIGIT_HYPHEN_DIGIT.sub(r"\1丁目\2", street, count=1)


def to_hyphen_notation(street: str) -> str:
    """
    丁目・番地・番をハイフンに、号を削除する（例: 1丁目6番3号 → 1-6-3）
    """
    s = RE_CHOME_BETWEEN_DIGITS.sub("-", street)
    return RE_TRAILING_UNIT.sub("", s)


def extract_core_address(street: str) -> Optional[str]:
    """
    番地部分（丁目-番-号）を抽出

    Returns:
        Optional[str]: 番地部分（見つからない場合はNone）
    """
    if not street:
        return None
    match = RE_CORE_ADDRESS.search(street)
    return match.group(0) if match else None


def strip_block_numbers(query: str) -> str:
    """番地の数字部分を取り除き、町域レベルのクエリにする"""
    return RE_WHITESPACE.sub(" ", RE_BLOCK_NUMBERS.sub(" ", query)).strip(" -")


def build_queries(address: AddressInput) -> list[str]:
    """
    住所入力から、具体的な順にジオコーディング候補クエリを生成

    1. 郵便番号のみ
    2. 都道府県 + 市区町村 + 番地
    3. 番地の表記違い（丁目表記・ハイフン表記）
    4. 番地部分のみ、および語順を入れ替えたもの
    5. 都道府県 + 市区町村

    都道府県は必須のため、結果が空になることはない

    Args:
        address: 住所入力

    Returns:
        list[str]: 重複のない候補クエリ（具体的な順）
    """
    prefecture = address.prefecture
    city_town = normalize(address.city_town, prefecture)
    street = normalize(address.street, prefecture)

    candidates: list[str] = []

    if address.postal_code:
        candidates.append(address.postal_code)

    candidates.append(_join(prefecture, city_town, street))

    if street:
        candidates.append(_join(prefecture, city_town, to_chome_notation(street)))
        candidates.append(_join(prefecture, city_town, to_hyphen_notation(street)))

        core = extract_core_address(street)
        if core and core != street:
            candidates.append(_join(prefecture, city_town, core))

            words = street.replace(core, f" {core} ").split()
            if len(words) > 1:
                candidates.append(_join(prefecture, *words))
                candidates.append(_join(prefecture, *reversed(words)))

    candidates.append(_join(prefecture, city_town))

    return dedupe_queries(candidates)
