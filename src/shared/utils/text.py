"""テキスト処理ユーティリティ"""

import re
from typing import Optional


def normalize_text(text: Optional[str]) -> Optional[str]:
    """
    自由記述テキストを正規化

    - 前後の空白を除去
    - 連続する空白を1つに
    - 全角スペースを半角スペースに変換
    """
    if not text:
        return None

    text = text.replace("　", " ")
    text = re.sub(r"[ \t\r\f\v]+", " ", text)
    text = text.strip()

    return text if text else None
