from __future__ import annotations


class InvalidInputTypeError(TypeError):
    """パーサに文字列以外が渡されたときの防御的な例外

    パース自体は任意の str に対して失敗しないため、
    ここに来るのは呼び出し側の型の取り違えのみ。
    """

    pass


class InvalidBase64Error(Exception):
    """Base64 デコード失敗時に投げる独自例外"""

    pass
