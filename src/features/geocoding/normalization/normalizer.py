"""住所テキストの正規化"""

import re
from typing import Optional

# 全角英数記号（！〜～）は固定オフセットで半角に対応する
FULLWIDTH_FIRST = 0xFF01
FULLWIDTH_LAST = 0xFF5E
FULLWIDTH_OFFSET = 0xFEE0
IDEOGRAPHIC_SPACE = "　"

# 数字に挟まれたダッシュ類（長音記号を含む）はハイフンとみなす
RE_DASH_BETWEEN_DIGITS = re.compile(r"(?<=\d)[‐‑‒–—―ー−](?=\d)")

RE_PARENTHETICAL = re.compile(r"\([^()]*\)|【[^【】]*】|「[^「」]*」")
RE_ROOM = re.compile(r"\d+号室")
RE_FLOOR = re.compile(r"(?<![\dA-Za-z])(?:地下)?B?\d+(?:[Ff]|階)(?![A-Za-z])")
RE_ANNEX = re.compile(r"\d+号館")
RE_BUILDING = re.compile(
    r"[ァ-ヶーA-Za-z・&'.]*"
    r"(?:ビルディング|ビル|マンション|アパート|ハイツ|コーポ|タワー|レジデンス|メゾン|会館)"
)
RE_POSTAL_CODE = re.compile(r"(?:〒\s*)?(?<![\d-])\d{3}-?\d{4}(?![\d-])")
RE_COUNTRY = re.compile(r"(?<![^\s,、])(?:日本国|日本|JAPAN|Japan)(?![^\s,、])")
RE_SEPARATORS = re.compile(r"[\s,、]+")
RE_POSTAL_CODE_FIELD = re.compile(r"^(\d{3})-?(\d{4})$")

TRIM_CHARS = " -,"


def to_halfwidth(text: str) -> str:
    """
    全角英数字・全角スペースを半角に変換

    数字に挟まれたダッシュ類もハイフンに揃える（例: １ー６ー３ → 1-6-3）
    """
    chars = []
    for ch in text:
        code = ord(ch)
        if FULLWIDTH_FIRST <= code <= FULLWIDTH_LAST:
            chars.append(chr(code - FULLWIDTH_OFFSET))
        elif ch == IDEOGRAPHIC_SPACE:
            chars.append(" ")
        else:
            chars.append(ch)

    return RE_DASH_BETWEEN_DIGITS.sub("-", "".join(chars))


def format_postal_code(text: Optional[str]) -> Optional[str]:
    """
    郵便番号を NNN-NNNN 形式に整形

    Args:
        text: 郵便番号（全角・〒記号・ハイフン有無を許容）

    Returns:
        Optional[str]: 整形済み郵便番号（7桁でない場合はNone）
    """
    if not text:
        return None

    value = to_halfwidth(text).strip().lstrip("〒").strip()
    match = RE_POSTAL_CODE_FIELD.match(value)
    if not match:
        return None

    return f"{match.group(1)}-{match.group(2)}"


def _strip_parentheticals(text: str) -> str:
    # 入れ子の括弧は内側から順に除去する
    while True:
        stripped = RE_PARENTHETICAL.sub(" ", text)
        if stripped == text:
            return stripped
        text = stripped


def _normalize_once(s: str, prefecture: Optional[str]) -> str:
    s = _strip_parentheticals(s)
    s = RE_ROOM.sub(" ", s)
    s = RE_FLOOR.sub(" ", s)
    s = RE_ANNEX.sub(" ", s)
    s = RE_BUILDING.sub(" ", s)

    s = RE_POSTAL_CODE.sub(" ", s)

    if prefecture:
        s = s.replace(prefecture, " ")
    s = RE_COUNTRY.sub(" ", s)

    s = RE_SEPARATORS.sub(" ", s)
    return s.strip(TRIM_CHARS)


def normalize(text: Optional[str], prefecture: Optional[str] = None) -> str:
    """
    ジオコーディング用に住所テキストを正規化

    1. 全角英数字・全角スペースを半角に変換
    2. 階数・部屋番号・括弧書き・建物名を除去
    3. 埋め込まれた郵便番号を除去
    4. 都道府県名・国名を除去
    5. 空白・読点の連続をまとめ、前後の区切り文字を除去

    除去した箇所は空白に置き換えるため、前後の語が連結されることはない。
    前後の区切り文字を除いたことで新たに国名・郵便番号が現れる場合があるため、
    結果が変わらなくなるまで 2〜5 を繰り返す。
    失敗することはなく、何も残らない場合は空文字列を返す。

    Args:
        text: 住所テキスト
        prefecture: 除去する都道府県名

    Returns:
        str: 正規化された住所
    """
    if not text:
        return ""

    s = to_halfwidth(text)

    # 各パスは文字列を短くするか区切り文字を揃えるだけなので必ず収束する
    while True:
        normalized = _normalize_once(s, prefecture)
        if normalized == s:
            return normalized
        s = normalized
