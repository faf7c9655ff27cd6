"""候補クエリ生成のテスト"""

import pytest

from src.features.geocoding.domain.models import AddressInput
from src.features.geocoding.normalization.query_builder import (
    build_queries,
    dedupe_queries,
    extract_core_address,
    is_postal_code_query,
    strip_block_numbers,
    to_chome_notation,
    to_hyphen_notation,
)


def test_build_queries_full_address(akihabara_address: AddressInput) -> None:
    """郵便番号・住所・丁目表記・市区町村の順で生成される"""
    assert build_queries(akihabara_address) == [
        "101-0021",
        "東京都 千代田区外神田 1-6-3",
        "東京都 千代田区外神田 1丁目6-3",
        "東京都 千代田区外神田",
    ]


def test_build_queries_prefecture_only() -> None:
    """都道府県のみでも空にならない"""
    assert build_queries(AddressInput(prefecture="大阪府")) == ["大阪府"]


def test_build_queries_chome_input_adds_hyphen_variant() -> None:
    """丁目・番・号表記の入力にはハイフン表記の候補を追加"""
    address = AddressInput(prefecture="東京都", city_town="千代田区外神田", street="1丁目6番3号")
    queries = build_queries(address)

    assert queries[0] == "東京都 千代田区外神田 1丁目6番3号"
    assert "東京都 千代田区外神田 1-6-3" in queries
    assert queries[-1] == "東京都 千代田区外神田"


def test_build_queries_strips_building_from_street() -> None:
    """番地欄に書かれた建物名・階数はクエリに含めない"""
    address = AddressInput(
        prefecture="東京都", city_town="千代田区外神田", street="1-6-3 ABCビル 5F"
    )
    assert build_queries(address)[0] == "東京都 千代田区外神田 1-6-3"


def test_build_queries_never_uses_building_line(akihabara_address: AddressInput) -> None:
    """建物名欄はジオコーディングに使わない"""
    address = AddressInput(
        postal_code="101-0021",
        prefecture="東京都",
        city_town="千代田区外神田",
        street="1-6-3",
        building_line="XYZタワー 10F",
    )
    assert build_queries(address) == build_queries(akihabara_address)


def test_build_queries_core_and_word_order_variants() -> None:
    """番地部分のみ・語順入れ替えの候補が市区町村のみより前に並ぶ"""
    address = AddressInput(prefecture="東京都", street="外神田 1-6-3")
    queries = build_queries(address)

    assert queries[0] == "東京都 外神田 1-6-3"
    assert "東京都 1-6-3" in queries
    assert "東京都 1-6-3 外神田" in queries
    assert queries[-1] == "東京都"


@pytest.mark.parametrize(
    "address",
    [
        AddressInput(prefecture="東京都"),
        AddressInput(prefecture="東京都", postal_code="1010021"),
        AddressInput(prefecture="北海道", city_town="札幌市中央区", street="北1条西2丁目"),
        AddressInput(prefecture="東京都", city_town="東京都千代田区", street="〒101-0021"),
        AddressInput(prefecture="京都府", city_town="京都市下京区", street="(未定)"),
    ],
)
def test_build_queries_non_empty_and_unique(address: AddressInput) -> None:
    """空文字列・重複を含まず、最低1件は生成される"""
    queries = build_queries(address)

    assert queries
    assert all(q.strip() for q in queries)
    assert len(set(queries)) == len(queries)


def test_build_queries_postal_code_first_and_coarse_last(akihabara_address: AddressInput) -> None:
    """最も具体的な郵便番号が先頭、市区町村のみが末尾"""
    queries = build_queries(akihabara_address)

    assert is_postal_code_query(queries[0])
    assert queries.index("東京都 千代田区外神田 1-6-3") < queries.index("東京都 千代田区外神田")


def test_dedupe_queries_preserves_order() -> None:
    """空白を揃えたうえで先勝ちで重複を除去"""
    assert dedupe_queries(["a  b", "", "c", "a b", " c "]) == ["a b", "c"]


@pytest.mark.parametrize(
    "street,expected",
    [
        ("1-6-3", "1丁目6-3"),
        ("1-6", "1丁目6"),
        ("1丁目6-3", "1丁目6-3"),
        ("外神田", "外神田"),
    ],
)
def test_to_chome_notation(street: str, expected: str) -> None:
    """最初の数字-数字のみ丁目表記にする"""
    assert to_chome_notation(street) == expected


@pytest.mark.parametrize(
    "street,expected",
    [
        ("1丁目6番3号", "1-6-3"),
        ("2丁目15番地", "2-15"),
        ("1-6-3", "1-6-3"),
    ],
)
def test_to_hyphen_notation(street: str, expected: str) -> None:
    """丁目・番地・番をハイフンに、号を削除"""
    assert to_hyphen_notation(street) == expected


def test_extract_core_address() -> None:
    """番地部分の抽出"""
    assert extract_core_address("外神田1丁目6-3") == "1丁目6-3"
    assert extract_core_address("駅前") is None
    assert extract_core_address("") is None


def test_strip_block_numbers() -> None:
    """番地を除いて町域レベルにする"""
    assert strip_block_numbers("東京都 千代田区外神田 1丁目6-3") == "東京都 千代田区外神田"
    assert strip_block_numbers("東京都 千代田区外神田") == "東京都 千代田区外神田"


@pytest.mark.parametrize(
    "query,expected",
    [("101-0021", True), ("東京都 101-0021", False), ("1010021", False)],
)
def test_is_postal_code_query(query: str, expected: bool) -> None:
    """郵便番号のみのクエリ判定"""
    assert is_postal_code_query(query) is expected
