"""ジオコーディング機能のEnum定義"""
from enum import Enum


class PrefectureCode(str, Enum):
    """都道府県コード（JIS X 0401準拠）"""

    HOKKAIDO = "01"
    AOMORI = "02"
    IWATE = "03"
    MIYAGI = "04"
    AKITA = "05"
    YAMAGATA = "06"
    FUKUSHIMA = "07"
    IBARAKI = "08"
    TOCHIGI = "09"
    GUNMA = "10"
    SAITAMA = "11"
    CHIBA = "12"
    TOKYO = "13"
    KANAGAWA = "14"
    NIIGATA = "15"
    TOYAMA = "16"
    ISHIKAWA = "17"
    FUKUI = "18"
    YAMANASHI = "19"
    NAGANO = "20"
    GIFU = "21"
    SHIZUOKA = "22"
    AICHI = "23"
    MIE = "24"
    SHIGA = "25"
    KYOTO = "26"
    OSAKA = "27"
    HYOGO = "28"
    NARA = "29"
    WAKAYAMA = "30"
    TOTTORI = "31"
    SHIMANE = "32"
    OKAYAMA = "33"
    HIROSHIMA = "34"
    YAMAGUCHI = "35"
    TOKUSHIMA = "36"
    KAGAWA = "37"
    EHIME = "38"
    KOCHI = "39"
    FUKUOKA = "40"
    SAGA = "41"
    NAGASAKI = "42"
    KUMAMOTO = "43"
    OITA = "44"
    MIYAZAKI = "45"
    KAGOSHIMA = "46"
    OKINAWA = "47"

    @property
    def name_ja(self) -> str:
        """日本語の都道府県名を取得"""
        return PREFECTURE_NAMES[self]

    @classmethod
    def from_name(cls, name: str) -> "PrefectureCode":
        """日本語の都道府県名から取得"""
        for code, pref_name in PREFECTURE_NAMES.items():
            if pref_name == name:
                return code
        raise ValueError(f"Invalid prefecture name: {name}")


# 都道府県名マッピング（日本語）
PREFECTURE_NAMES = {
    PrefectureCode.HOKKAIDO: "北海道",
    PrefectureCode.AOMORI: "青森県",
    PrefectureCode.IWATE: "岩手県",
    PrefectureCode.MIYAGI: "宮城県",
    PrefectureCode.AKITA: "秋田県",
    PrefectureCode.YAMAGATA: "山形県",
    PrefectureCode.FUKUSHIMA: "福島県",
    PrefectureCode.IBARAKI: "茨城県",
    PrefectureCode.TOCHIGI: "栃木県",
    PrefectureCode.GUNMA: "群馬県",
    PrefectureCode.SAITAMA: "埼玉県",
    PrefectureCode.CHIBA: "千葉県",
    PrefectureCode.TOKYO: "東京都",
    PrefectureCode.KANAGAWA: "神奈川県",
    PrefectureCode.NIIGATA: "新潟県",
    PrefectureCode.TOYAMA: "富山県",
    PrefectureCode.ISHIKAWA: "石川県",
    PrefectureCode.FUKUI: "福井県",
    PrefectureCode.YAMANASHI: "山梨県",
    PrefectureCode.NAGANO: "長野県",
    PrefectureCode.GIFU: "岐阜県",
    PrefectureCode.SHIZUOKA: "静岡県",
    PrefectureCode.AICHI: "愛知県",
    PrefectureCode.MIE: "三重県",
    PrefectureCode.SHIGA: "滋賀県",
    PrefectureCode.KYOTO: "京都府",
    PrefectureCode.OSAKA: "大阪府",
    PrefectureCode.HYOGO: "兵庫県",
    PrefectureCode.NARA: "奈良県",
    PrefectureCode.WAKAYAMA: "和歌山県",
    PrefectureCode.TOTTORI: "鳥取県",
    PrefectureCode.SHIMANE: "島根県",
    PrefectureCode.OKAYAMA: "岡山県",
    PrefectureCode.HIROSHIMA: "広島県",
    PrefectureCode.YAMAGUCHI: "山口県",
    PrefectureCode.TOKUSHIMA: "徳島県",
    PrefectureCode.KAGAWA: "香川県",
    PrefectureCode.EHIME: "愛媛県",
    PrefectureCode.KOCHI: "高知県",
    PrefectureCode.FUKUOKA: "福岡県",
    PrefectureCode.SAGA: "佐賀県",
    PrefectureCode.NAGASAKI: "長崎県",
    PrefectureCode.KUMAMOTO: "熊本県",
    PrefectureCode.OITA: "大分県",
    PrefectureCode.MIYAZAKI: "宮崎県",
    PrefectureCode.KAGOSHIMA: "鹿児島県",
    PrefectureCode.OKINAWA: "沖縄県",
}

# 入力検証用の都道府県名集合（47件）
PREFECTURE_NAME_SET = frozenset(PREFECTURE_NAMES.values())


class GeocodeProvider(str, Enum):
    """座標の出所"""

    GSI = "gsi"  # 国土地理院 住所検索API
    NOMINATIM = "nominatim"  # OpenStreetMap Nominatim
    GOOGLE_MAPS = "google_maps"  # Google Maps Geocoding API（任意）
    MANUAL = "manual"  # 地図上で手動指定


class ResolutionState(str, Enum):
    """座標の解決状態"""

    UNRESOLVED = "unresolved"  # 未解決（センチネル座標）
    AUTO_RESOLVED = "auto_resolved"  # ジオコーディングで自動解決
    MANUAL_OVERRIDE = "manual_override"  # 手動指定（自動解決で上書きしない）


class FailureKind(str, Enum):
    """プロバイダー呼び出し失敗の分類（ログ用）"""

    NETWORK_FAILURE = "network_failure"
    EMPTY_RESULT = "empty_result"
    MALFORMED_RESPONSE = "malformed_response"
