"""config.pyのテスト"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from club_score.config import Settings, get_settings


class TestSettings:
    """Settingsクラスのテスト"""

    def test_create_settings_from_env(self, monkeypatch):
        """環境変数から設定を作成できること"""
        monkeypatch.setenv("ADMIN_PASSWORD", "test_password")

        settings = Settings()

        assert settings.admin_password.get_secret_value() == "test_password"

    def test_default_values(self, monkeypatch):
        """デフォルト値が正しく設定されること"""
        monkeypatch.setenv("ADMIN_PASSWORD", "test_password")

        settings = Settings()

        assert settings.debug is False
        assert settings.data_file == Path("data/games.json")
        assert settings.output_dir == Path("output")
        assert settings.player_alias_file == Path("data/player_aliases.yaml")
        assert settings.pairing_sides == [("A", "B"), ("C", "D")]

    def test_override_default_values(self, monkeypatch):
        """デフォルト値を上書きできること"""
        monkeypatch.setenv("ADMIN_PASSWORD", "test_password")
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("DATA_FILE", "/custom/games.json")
        monkeypatch.setenv("PAIRING_SIDES", '[["A","C"],["B","D"]]')

        settings = Settings()

        assert settings.debug is True
        assert settings.data_file == Path("/custom/games.json")
        assert settings.pairing_sides == [("A", "C"), ("B", "D")]

    @pytest.mark.parametrize(
        "pairing_sides",
        [
            '[["A","B"],["A","C"]]',
            '[["A","B"],["C","B"]]',
            '[["A","A"]]',
            '[["A",""]]',
            '[[" ","B"]]',
        ],
    )
    def test_invalid_pairing_sides_raises_error(self, monkeypatch, pairing_sides):
        """重複・同一・空のチームラベルを含む組み合わせはエラーになること"""
        monkeypatch.setenv("ADMIN_PASSWORD", "test_password")
        monkeypatch.setenv("PAIRING_SIDES", pairing_sides)

        with pytest.raises(ValidationError):
            Settings()

    def test_pairing_sides_are_stripped(self, monkeypatch):
        """チームラベルの前後の空白は取り除かれること"""
        monkeypatch.setenv("ADMIN_PASSWORD", "test_password")
        monkeypatch.setenv("PAIRING_SIDES", '[[" A ","B"]]')

        settings = Settings()

        assert settings.pairing_sides == [("A", "B")]

    def test_missing_password_raises_error(self, monkeypatch):
        """管理者パスワードが未設定の場合はエラーになること"""
        monkeypatch.delenv("ADMIN_PASSWORD", raising=False)

        with pytest.raises(ValidationError):
            Settings()

    def test_blank_password_raises_error(self, monkeypatch):
        """空白のみのパスワードはエラーになること"""
        monkeypatch.setenv("ADMIN_PASSWORD", "   ")

        with pytest.raises(ValidationError):
            Settings()

    def test_password_is_secret(self, monkeypatch):
        """パスワードがSecretStr型であること"""
        monkeypatch.setenv("ADMIN_PASSWORD", "test_password")

        settings = Settings()

        # strとして直接アクセスできない
        assert str(settings.admin_password) == "**********"
        # get_secret_value()で取得できる
        assert settings.admin_password.get_secret_value() == "test_password"

    def test_output_dir_as_path(self, monkeypatch):
        """出力ディレクトリがPath型に変換されること"""
        monkeypatch.setenv("ADMIN_PASSWORD", "test_password")
        monkeypatch.setenv("OUTPUT_DIR", "/custom/output")

        settings = Settings()

        assert isinstance(settings.output_dir, Path)
        assert settings.output_dir == Path("/custom/output")


class TestGetSettings:
    """get_settings関数のテスト"""

    def test_get_settings(self, monkeypatch):
        """設定を取得できること"""
        monkeypatch.setenv("ADMIN_PASSWORD", "test_password")

        settings = get_settings()

        assert isinstance(settings, Settings)
        assert settings.admin_password.get_secret_value() == "test_password"
