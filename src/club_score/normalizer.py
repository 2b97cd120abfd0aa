"""データ正規化モジュール

ホール別スコアの重複解消、スコア分類、プレイヤー名の正規化を行う。
"""

from collections.abc import Iterable
from pathlib import Path

import yaml

from .models import HoleScore, ScoreCategory


def normalize_scores(scores: Iterable[HoleScore]) -> dict[int, int]:
    """ホールごとに1つのスコアへ正規化する

    同じホールのレコードが複数ある場合は最後に書き込まれたものを採用する。
    書き込み順はseqで決まり、seqのないレコードはseqを持つどのレコードよりも
    古いものとして扱う。seqが同じ、またはどちらもseqを持たない場合は入力順。

    Args:
        scores: HoleScoreの列

    Returns:
        dict[int, int]: ホール番号 → スコア(スコアのないホールはキー自体がない)

    Examples:
        >>> normalize_scores([HoleScore(hole_number=1, score=2), HoleScore(hole_number=1, score=0)])
        {1: 0}
    """
    # sortedは安定ソートなので同順位は入力順のまま残る
    ordered = sorted(
        scores,
        key=lambda s: (s.seq is not None, s.seq if s.seq is not None else 0),
    )
    latest: dict[int, int] = {}
    for record in ordered:
        latest[record.hole_number] = record.score
    return dict(sorted(latest.items()))


def classify_score(score: int) -> ScoreCategory:
    """パーに対する打数差をスコア分類に変換する

    Args:
        score: パーに対する打数差

    Returns:
        ScoreCategory: -3以下はアルバトロス、+2以上はダブルボギー以上
    """
    if score <= -3:
        return ScoreCategory.ALBATROSS
    if score == -2:
        return ScoreCategory.EAGLE
    if score == -1:
        return ScoreCategory.BIRDIE
    if score == 0:
        return ScoreCategory.PAR
    if score == 1:
        return ScoreCategory.BOGEY
    return ScoreCategory.DOUBLE_BOGEY


class NameNormalizer:
    """プレイヤー名正規化クラス

    試合作成時に手入力された名前の表記ゆれを、
    マッピングファイル(YAML)で正式名にまとめる。
    """

    def __init__(self, alias_file: Path | None = None):
        """初期化

        Args:
            alias_file: 別名マッピングファイルのパス(省略時は data/player_aliases.yaml)
        """
        if alias_file is None:
            # このファイルの位置から project_root を推測
            alias_file = Path(__file__).parent.parent.parent / "data" / "player_aliases.yaml"

        self.alias_file = alias_file
        self._load_mappings()

    def _load_mappings(self) -> None:
        """マッピングファイルを読み込む"""
        if self.alias_file.exists():
            with self.alias_file.open(encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
            self.aliases: dict[str, str] = {
                str(k).strip(): str(v).strip() for k, v in raw.items()
            }
        else:
            self.aliases = {}

    def canonical_name(self, name: str) -> str:
        """プレイヤー名を正規化する

        Args:
            name: 元のプレイヤー名

        Returns:
            str: 正規化されたプレイヤー名(マッピングにない場合は前後の空白を除いたもの)

        Examples:
            >>> normalizer = NameNormalizer(Path("/nonexistent.yaml"))
            >>> normalizer.canonical_name("  김철수 ")
            '김철수'
        """
        stripped = name.strip()
        return self.aliases.get(stripped, stripped)
