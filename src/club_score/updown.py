"""アップダウン計算モジュール

組内で対戦する2チームについて、ホールごとに
「最小スコアが低い方に1点」「最大スコアが低い方に1点」を与え、
18ホール分を合計する。
"""

from collections.abc import Iterable, Sequence

from .models import (
    HOLES_PER_ROUND,
    GameView,
    Pairing,
    PairingResult,
    PlayerEntry,
    UpDownResult,
)
from .normalizer import normalize_scores

ALL_HOLES = range(1, HOLES_PER_ROUND + 1)


def compare_hole(
    team_a_scores: Iterable[int | None],
    team_b_scores: Iterable[int | None],
) -> UpDownResult:
    """1ホール分のアップダウンを計算する

    Args:
        team_a_scores: A側メンバーのスコア(未入力はNone)
        team_b_scores: B側メンバーのスコア(未入力はNone)

    Returns:
        UpDownResult: 各側の獲得ポイント(0〜2)。どちらかが全員未入力なら0対0

    Examples:
        >>> compare_hole([-1, 1], [0, 2])
        UpDownResult(a_points=2, b_points=0)
    """
    a = [s for s in team_a_scores if s is not None]
    b = [s for s in team_b_scores if s is not None]
    if not a or not b:
        return UpDownResult()

    a_points = 0
    b_points = 0
    for a_value, b_value in ((min(a), min(b)), (max(a), max(b))):
        if a_value < b_value:
            a_points += 1
        elif b_value < a_value:
            b_points += 1
    return UpDownResult(a_points=a_points, b_points=b_points)


def _side_holes(
    players: Sequence[PlayerEntry], pairing: Pairing, team: str
) -> list[dict[int, int]]:
    return [
        normalize_scores(p.scores)
        for p in players
        if p.group == pairing.group and p.team == team
    ]


def compare_pairing(
    pairing: Pairing,
    players: Sequence[PlayerEntry],
    holes: Iterable[int] = ALL_HOLES,
) -> PairingResult:
    """ペアリング1つ分のアップダウンを合計する

    各側のメンバー全員のホール別スコア(正規化済み)を、
    そのホールの最小・最大の比較に使う。

    Args:
        pairing: 対戦の組み合わせ
        players: 試合の全プレイヤー(組・チームで絞り込む)
        holes: 対象ホール(既定は1〜18)

    Returns:
        PairingResult: 各側の合計ポイント
    """
    side_a = _side_holes(players, pairing, pairing.side_a)
    side_b = _side_holes(players, pairing, pairing.side_b)

    a_total = 0
    b_total = 0
    for hole_number in holes:
        result = compare_hole(
            [h.get(hole_number) for h in side_a],
            [h.get(hole_number) for h in side_b],
        )
        a_total += result.a_points
        b_total += result.b_points
    return PairingResult(pairing=pairing, a_total=a_total, b_total=b_total)


def compare_game(game: GameView, holes: Iterable[int] = ALL_HOLES) -> list[PairingResult]:
    """試合内の全ペアリングのアップダウンを計算する"""
    hole_list = list(holes)
    return [compare_pairing(p, game.players, hole_list) for p in game.pairings]


def team_points(results: Iterable[PairingResult]) -> dict[tuple[str, str], int]:
    """(組, チームラベル) → アップダウン獲得ポイント"""
    points: dict[tuple[str, str], int] = {}
    for result in results:
        pairing = result.pairing
        points[(pairing.group, pairing.side_a)] = result.a_total
        points[(pairing.group, pairing.side_b)] = result.b_total
    return points
