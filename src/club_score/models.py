"""データモデルモジュール

ゴルフ会の試合・組・プレイヤー・ホール別スコアの型定義とバリデーションを提供する。
ストアから取得したネスト形式のレコードをそのまま受け取れるよう、入力側は寛容に、
集計結果側は不変(frozen)に定義する。
"""

import datetime
import logging
from collections.abc import Sequence
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)

HOLES_PER_ROUND = 18

# 組内で対戦するチームの組み合わせ(既定値)
DEFAULT_PAIRING_SIDES: tuple[tuple[str, str], ...] = (("A", "B"), ("C", "D"))


def _as_text(value: Any) -> str:
    """ID・ラベル類を文字列に揃える(Noneは空文字)"""
    if value is None:
        return ""
    return str(value).strip()


class ScoreCategory(str, Enum):
    """パー基準スコアの分類"""

    ALBATROSS = "albatross"
    EAGLE = "eagle"
    BIRDIE = "birdie"
    PAR = "par"
    BOGEY = "bogey"
    DOUBLE_BOGEY = "double_bogey"

    @property
    def label(self) -> str:
        """表示用ラベル"""
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    ScoreCategory.ALBATROSS: "アルバトロス",
    ScoreCategory.EAGLE: "イーグル",
    ScoreCategory.BIRDIE: "バーディー",
    ScoreCategory.PAR: "パー",
    ScoreCategory.BOGEY: "ボギー",
    ScoreCategory.DOUBLE_BOGEY: "ダブルボギー以上",
}


class HoleScore(BaseModel):
    """1ホール分のスコアレコード

    scoreはパーに対する打数差(例: バーディーなら-1)。
    同じホールのレコードが複数存在しうるため、seqで書き込み順を表す。
    """

    model_config = ConfigDict(frozen=True)

    hole_number: int = Field(..., ge=1, le=HOLES_PER_ROUND, description="ホール番号(1-18)")
    score: int = Field(..., description="パーに対する打数差")
    seq: int | None = Field(
        default=None, description="書き込み順序(単調増加のシーケンスまたはタイムスタンプ)"
    )

    @field_validator("hole_number", "score", mode="before")
    @classmethod
    def _reject_bool_and_float(cls, value: Any) -> Any:
        # JSONのtrue/falseや1.0を整数として扱わない(数字の文字列は許可)
        if isinstance(value, (bool, float)):
            raise ValueError(f"整数ではありません: {value!r}")
        return value


def _as_records(value: Any, what: str) -> list[Any]:
    """リストであるべき値を取り出す(Noneは空、リスト以外は警告して空)"""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    logger.warning("%sの形式が不正なためスキップしました: %r", what, value)
    return []


def parse_hole_scores(raw: Any) -> list[HoleScore]:
    """生のスコアレコード列をHoleScoreのリストに変換する

    ホール番号が範囲外、スコアが整数でないなどの不正なレコードは
    集計全体を止めないよう、警告ログを出してスキップする。
    リスト以外の値はレコードなしとして扱う。

    Args:
        raw: dictまたはHoleScoreの列

    Returns:
        list[HoleScore]: 妥当なレコードのみのリスト(入力順を維持)
    """
    parsed: list[HoleScore] = []
    for item in _as_records(raw, "スコアレコード"):
        if isinstance(item, HoleScore):
            parsed.append(item)
            continue
        try:
            parsed.append(HoleScore.model_validate(item))
        except ValidationError as e:
            logger.warning(
                "不正なスコアレコードをスキップしました: %r (%d件のエラー)",
                item,
                e.error_count(),
            )
    return parsed


class PlayerEntry(BaseModel):
    """試合に参加したプレイヤー1人分のエントリー"""

    id: str = Field(..., description="プレイヤーID")
    name: str = Field(..., description="プレイヤー名")
    team: str = Field(default="", description="チームラベル(A/B/C/Dなど、空文字は所属不明)")
    group: str = Field(default="", description="組ラベル(1조、2조など)")
    scores: list[HoleScore] = Field(default_factory=list, description="ホール別スコア")

    @field_validator("id", "name", "team", "group", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("scores", mode="before")
    @classmethod
    def _drop_malformed_scores(cls, value: Any) -> list[HoleScore]:
        return parse_hole_scores(value)


class Pairing(BaseModel):
    """組内でアップダウンを競う2チームの組み合わせ"""

    model_config = ConfigDict(frozen=True)

    group: str = Field(..., description="組ラベル")
    side_a: str = Field(..., description="A側のチームラベル")
    side_b: str = Field(..., description="B側のチームラベル")

    @field_validator("group", "side_a", "side_b", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> str:
        return _as_text(value)

    @model_validator(mode="after")
    def _check_distinct_sides(self) -> "Pairing":
        if not self.side_a or not self.side_b:
            raise ValueError("ペアリングのチームラベルが空です")
        if self.side_a == self.side_b:
            raise ValueError(f"同じチーム同士はペアリングできません: {self.side_a}")
        return self


class GameView(BaseModel):
    """1試合分のデータ(集計の入力)"""

    id: str = Field(..., description="試合ID")
    name: str = Field(default="", description="試合名")
    date: datetime.date = Field(..., description="開催日")
    players: list[PlayerEntry] = Field(default_factory=list, description="参加プレイヤー")
    pairings: list[Pairing] = Field(default_factory=list, description="アップダウンの対戦組み合わせ")

    @field_validator("id", "name", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("date", mode="before")
    @classmethod
    def _strip_time(cls, value: Any) -> Any:
        # "2025-07-20T00:00:00+00:00" のような日時文字列は日付部分のみ使う
        if isinstance(value, str) and len(value) > 10:
            return value[:10]
        return value

    @model_validator(mode="after")
    def _check_pairings(self) -> "GameView":
        seen: set[tuple[str, str]] = set()
        for pairing in self.pairings:
            for side in (pairing.side_a, pairing.side_b):
                key = (pairing.group, side)
                if key in seen:
                    raise ValueError(
                        f"チーム {side} が組 {pairing.group} の複数のペアリングに含まれています"
                    )
                seen.add(key)
        return self

    @classmethod
    def from_record(
        cls,
        record: dict[str, Any],
        pairing_sides: Sequence[tuple[str, str]] = DEFAULT_PAIRING_SIDES,
    ) -> "GameView":
        """ストアのネスト形式レコードからGameViewを組み立てる

        レコードの形式は games → teams(組) → team_players → {player, team_name, scores}。
        組ラベルはteamsのnameをそのまま使う。レコードにpairingsがあればそれを優先し、
        なければpairing_sidesのうち両チームが組内に揃っているものを対戦とする。

        Args:
            record: 1試合分の生レコード
            pairing_sides: 対戦させるチームラベルの組み合わせ

        Returns:
            GameView: 組み立てた試合データ
        """
        players: list[PlayerEntry] = []
        pairings: list[Pairing] = []

        for group in _as_records(record.get("teams"), "組(teams)"):
            if not isinstance(group, dict):
                logger.warning("組の形式が不正なためスキップしました: %r", group)
                continue
            group_label = _as_text(group.get("name"))
            group_players = []
            for team_player in _as_records(group.get("team_players"), "組の参加者(team_players)"):
                if not isinstance(team_player, dict):
                    logger.warning("参加者の形式が不正なためスキップしました: %r", team_player)
                    continue
                player = team_player.get("player")
                if player is None:
                    player = {}
                elif not isinstance(player, dict):
                    logger.warning("プレイヤー情報の形式が不正なためスキップしました: %r", player)
                    continue
                group_players.append(
                    PlayerEntry(
                        id=player.get("id") or team_player.get("id"),
                        name=player.get("name"),
                        team=team_player.get("team_name"),
                        group=group_label,
                        scores=team_player.get("scores"),
                    )
                )
            players.extend(group_players)

            labels = {p.team for p in group_players}
            for side_a, side_b in pairing_sides:
                if side_a in labels and side_b in labels:
                    pairings.append(Pairing(group=group_label, side_a=side_a, side_b=side_b))

        if "pairings" in record:
            pairings = [
                Pairing.model_validate(p) for p in _as_records(record["pairings"], "pairings")
            ]

        return cls(
            id=record.get("id"),
            name=record.get("name"),
            date=record.get("date"),
            players=players,
            pairings=pairings,
        )


class PlayerResult(BaseModel):
    """プレイヤー1人分の集計結果"""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    group: str
    team: str
    total: int = Field(..., description="パーに対する打数差の合計")
    holes_completed: int = Field(..., description="スコア入力済みのホール数")
    category_counts: dict[ScoreCategory, int] = Field(default_factory=dict)
    category_holes: dict[ScoreCategory, list[int]] = Field(default_factory=dict)

    @property
    def through(self) -> str:
        """進行状況の表示(例: "12/18")"""
        return f"{self.holes_completed}/{HOLES_PER_ROUND}"


class TeamResult(BaseModel):
    """組内チーム1つ分の集計結果"""

    model_config = ConfigDict(frozen=True)

    team_label: str
    group_label: str
    member_names: list[str] = Field(default_factory=list)
    total: int = 0


class GameResult(BaseModel):
    """試合1つ分の集計結果"""

    model_config = ConfigDict(frozen=True)

    players: list[PlayerResult] = Field(default_factory=list)
    teams: list[TeamResult] = Field(default_factory=list)


class UpDownResult(BaseModel):
    """1ホール分のアップダウン結果"""

    model_config = ConfigDict(frozen=True)

    a_points: int = Field(default=0, ge=0, le=2)
    b_points: int = Field(default=0, ge=0, le=2)

    def swapped(self) -> "UpDownResult":
        """A側とB側を入れ替えた結果を返す"""
        return UpDownResult(a_points=self.b_points, b_points=self.a_points)


class PairingResult(BaseModel):
    """ペアリング1つ分のアップダウン合計"""

    model_config = ConfigDict(frozen=True)

    pairing: Pairing
    a_total: int = 0
    b_total: int = 0


class GameTotal(BaseModel):
    """統計用の試合別スコア"""

    model_config = ConfigDict(frozen=True)

    game_id: str
    game_name: str
    game_date: datetime.date
    total: int


class PlayerAverage(BaseModel):
    """複数試合にまたがるプレイヤー統計

    18ホールを完了した試合のみを対象とし、該当試合がなければaverageはNone。
    """

    model_config = ConfigDict(frozen=True)

    name: str
    average: float | None = None
    game_count: int = 0
    games: list[GameTotal] = Field(default_factory=list)

    @property
    def available(self) -> bool:
        return self.average is not None


class RankedPlayer(BaseModel):
    """順位付きのプレイヤー結果"""

    model_config = ConfigDict(frozen=True)

    rank: int
    player: PlayerResult


class TeamRow(BaseModel):
    """リーダーボードのチーム行"""

    model_config = ConfigDict(frozen=True)

    team: TeamResult
    up_down: int | None = Field(
        default=None, description="アップダウン獲得ポイント(ペアリング外のチームはNone)"
    )


class CategoryEntry(BaseModel):
    """スコア分類サマリーの1行"""

    model_config = ConfigDict(frozen=True)

    name: str
    count: int
    holes: list[int] = Field(default_factory=list)


class Leaderboard(BaseModel):
    """試合1つ分のリーダーボード"""

    model_config = ConfigDict(frozen=True)

    game_id: str
    game_name: str
    game_date: datetime.date
    players: list[RankedPlayer] = Field(default_factory=list)
    teams: list[TeamRow] = Field(default_factory=list)
    pairings: list[PairingResult] = Field(default_factory=list)
    category_summary: dict[ScoreCategory, list[CategoryEntry]] = Field(default_factory=dict)

    def to_dict(self) -> dict:
        """辞書形式に変換(JSON出力用)

        Returns:
            dict: リーダーボードの辞書表現
        """
        return self.model_dump(mode="json")
