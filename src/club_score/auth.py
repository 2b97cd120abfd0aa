"""認証モジュール

管理画面用のパスワードチェックを行う。
"""

import hmac
import logging
import secrets

from .config import Settings

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """認証失敗時の例外"""

    pass


def verify_admin_password(password: str, settings: Settings) -> str:
    """管理者パスワードを検証する

    Args:
        password: 入力されたパスワード
        settings: アプリケーション設定

    Returns:
        str: 管理セッション用トークン

    Raises:
        AuthError: パスワードが空、または一致しない場合
    """
    if not password:
        raise AuthError("パスワードが入力されていません")

    expected = settings.admin_password.get_secret_value()
    if not hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("管理者パスワードが一致しませんでした")
        raise AuthError("パスワードが正しくありません")

    logger.info("管理者として認証しました")
    return secrets.token_urlsafe(32)
