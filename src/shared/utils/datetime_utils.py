"""日時関連ユーティリティ"""

from datetime import datetime, timezone

import pytz

# 日本時間のタイムゾーン
JST = pytz.timezone("Asia/Tokyo")


def now_jst() -> datetime:
    """現在の日本時間を取得"""
    return datetime.now(JST)


def to_jst(dt: datetime) -> datetime:
    """
    datetimeを日本時間に変換

    Args:
        dt: 変換対象のdatetime

    Returns:
        日本時間のdatetime
    """
    if dt.tzinfo is None:
        # タイムゾーン情報がない場合はUTCとして扱う
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(JST)


def format_duration(seconds: float) -> str:
    """
    秒数を読みやすい形式に変換

    Args:
        seconds: 秒数

    Returns:
        "1分23秒" のような文字列
    """
    minutes = int(seconds // 60)
    secs = int(seconds % 60)

    if minutes > 0:
        return f"{minutes}分{secs}秒"
    return f"{secs}秒"
