"""設定管理モジュール

環境変数から設定を読み込み、アプリケーション全体で使用する設定を提供する。
"""

from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import DEFAULT_PAIRING_SIDES


class Settings(BaseSettings):
    """アプリケーション設定

    環境変数または.envファイルから設定を読み込む。
    管理者パスワードには既定値を持たせず、未設定なら起動時にエラーとする。
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 管理者パスワード(必須)
    admin_password: SecretStr = Field(
        ...,
        description="管理画面のパスワード",
    )

    # オプション設定
    debug: bool = Field(
        default=False,
        description="デバッグモード(true: デバッグ情報出力)",
    )
    data_file: Path = Field(
        default=Path("data/games.json"),
        description="試合データのスナップショットファイル",
    )
    output_dir: Path = Field(
        default=Path("output"),
        description="出力ディレクトリ",
    )
    player_alias_file: Path = Field(
        default=Path("data/player_aliases.yaml"),
        description="プレイヤー名の別名マッピングファイル",
    )

    # アップダウンの対戦組み合わせ(JSON形式: [["A","B"],["C","D"]])
    pairing_sides: list[tuple[str, str]] = Field(
        default_factory=lambda: list(DEFAULT_PAIRING_SIDES),
        description="組内で対戦させるチームラベルの組み合わせ",
    )

    @field_validator("admin_password")
    @classmethod
    def _reject_blank_password(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("ADMIN_PASSWORD が空です")
        return value

    @field_validator("pairing_sides")
    @classmethod
    def _check_pairing_sides(cls, value: list[tuple[str, str]]) -> list[tuple[str, str]]:
        # 1つのチームラベルは1つの組み合わせにしか入れない
        checked: list[tuple[str, str]] = []
        used: set[str] = set()
        for side_a, side_b in value:
            side_a, side_b = side_a.strip(), side_b.strip()
            if not side_a or not side_b:
                raise ValueError("PAIRING_SIDES に空のチームラベルがあります")
            if side_a == side_b:
                raise ValueError(f"PAIRING_SIDES で同じチーム同士が組み合わされています: {side_a}")
            for side in (side_a, side_b):
                if side in used:
                    raise ValueError(f"PAIRING_SIDES でチーム {side} が複数の組み合わせに含まれています")
                used.add(side)
            checked.append((side_a, side_b))
        return checked


def get_settings() -> Settings:
    """設定インスタンスを取得する

    Returns:
        Settings: アプリケーション設定
    """
    return Settings()
