"""チャンネル・素材の識別子正規化."""

from __future__ import annotations

import re

# https://tenor.com/@name, /users/name, /profile/name
_CHANNEL_URL_PATTERNS = [
    re.compile(r"/@([^/?#]+)", re.IGNORECASE),
    re.compile(r"/users/([^/?#]+)", re.IGNORECASE),
    re.compile(r"/profile/([^/?#]+)", re.IGNORECASE),
]

_DIGITS_ONLY = re.compile(r"[0-9]+")
_LAST_DIGITS = re.compile(r"([0-9]+)(?!.*[0-9])")


class InvalidInputError(ValueError):
    """利用者の指定（チャンネル・素材 ID・キーワード）が不正."""


def normalize_channel_ref(ref: str) -> str:
    """チャンネル URL・@ハンドル・ユーザー名からユーザー名を取り出す.

    どのパターンにも一致しなければユーザー名とみなしてそのまま返す。
    """
    value = (ref or "").strip()
    if value.startswith("@"):
        return value[1:]

    for pattern in _CHANNEL_URL_PATTERNS:
        m = pattern.search(value)
        if m:
            return m.group(1)

    return value


def normalize_item_ref(ref: str) -> str:
    """素材 ID・URL・共有リンクから数値 ID を取り出す.

    Returns:
        数字のみならそのまま、それ以外は末尾の数字列。数字を含まなければ入力のまま。
    """
    value = (ref or "").strip()
    if not value or _DIGITS_ONLY.fullmatch(value):
        return value

    m = _LAST_DIGITS.search(value)
    if m:
        return m.group(1)
    return value
