"""集計モジュール

正規化済みのホール別スコアから、プレイヤー・チーム単位の合計と
複数試合にまたがる平均スコアを計算する。
"""

import logging
from collections.abc import Iterable, Sequence
from decimal import ROUND_FLOOR, Decimal

from .models import (
    HOLES_PER_ROUND,
    GameResult,
    GameTotal,
    GameView,
    PlayerAverage,
    PlayerEntry,
    PlayerResult,
    ScoreCategory,
    TeamResult,
)
from .normalizer import NameNormalizer, classify_score, normalize_scores

logger = logging.getLogger(__name__)


def aggregate_player(entry: PlayerEntry) -> PlayerResult:
    """プレイヤー1人分のスコアを集計する

    Args:
        entry: プレイヤーエントリー

    Returns:
        PlayerResult: 合計・完了ホール数・スコア分類別の集計
    """
    holes = normalize_scores(entry.scores)

    category_holes: dict[ScoreCategory, list[int]] = {c: [] for c in ScoreCategory}
    for hole_number, score in holes.items():
        category_holes[classify_score(score)].append(hole_number)

    result = PlayerResult(
        id=entry.id,
        name=entry.name,
        group=entry.group,
        team=entry.team,
        total=sum(holes.values()),
        holes_completed=len(holes),
        category_counts={c: len(h) for c, h in category_holes.items()},
        category_holes=category_holes,
    )
    logger.debug(
        "集計: %s total=%d through=%s", result.name, result.total, result.through
    )
    return result


def aggregate_game(game: GameView) -> GameResult:
    """試合1つ分のスコアを集計する

    チームは(組, チームラベル)単位でまとめ、組の登場順、チームラベル順に並べる。

    Args:
        game: 試合データ

    Returns:
        GameResult: プレイヤー結果(入力順)とチーム結果
    """
    players = [aggregate_player(entry) for entry in game.players]

    group_order: dict[str, int] = {}
    members: dict[tuple[str, str], list[PlayerResult]] = {}
    for player in players:
        group_order.setdefault(player.group, len(group_order))
        members.setdefault((player.group, player.team), []).append(player)

    teams = [
        TeamResult(
            team_label=team,
            group_label=group,
            member_names=[p.name for p in team_members],
            total=sum(p.total for p in team_members),
        )
        for (group, team), team_members in sorted(
            members.items(), key=lambda item: (group_order[item[0][0]], item[0][1])
        )
    ]
    return GameResult(players=players, teams=teams)


def rank_players(players: Iterable[PlayerResult]) -> list[PlayerResult]:
    """合計スコアの昇順に並べる(同点は入力順を維持)"""
    return sorted(players, key=lambda p: p.total)


def is_complete(result: PlayerResult) -> bool:
    """18ホールすべてのスコアが揃っているか"""
    return result.holes_completed == HOLES_PER_ROUND


def round_half_up(value: Decimal, places: int = 1) -> float:
    """小数点以下places桁に四捨五入する(端数0.5は正の無限大方向に丸める)

    Examples:
        >>> round_half_up(Decimal("2.25"))
        2.3
        >>> round_half_up(Decimal("-2.25"))
        -2.2
    """
    scale = Decimal(10) ** places
    shifted = (value * scale + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR)
    return float(shifted / scale)


def player_averages(
    games: Sequence[GameView],
    name_normalizer: NameNormalizer | None = None,
) -> list[PlayerAverage]:
    """複数試合にまたがるプレイヤー別の平均スコアを計算する

    18ホールを完了した試合のみを平均の対象とする。17ホール以下の試合は
    部分的にも数えない。対象試合がないプレイヤーのaverageはNone。
    1試合に同じ正式名のエントリーが複数ある場合は最初の1件のみを使う。

    Args:
        games: 試合データのリスト
        name_normalizer: プレイヤー名の正規化(省略時は前後の空白除去のみ)

    Returns:
        list[PlayerAverage]: プレイヤーの登場順(新しい試合から)に並べた統計
    """
    # 統計は新しい試合から並べる(同日は入力順)
    ordered_games = sorted(games, key=lambda g: g.date, reverse=True)

    totals: dict[str, list[GameTotal]] = {}
    for game in ordered_games:
        seen: set[str] = set()
        for result in aggregate_game(game).players:
            name = (
                name_normalizer.canonical_name(result.name)
                if name_normalizer is not None
                else result.name
            )
            # 同じ試合に同名(別名を含む)のエントリーが複数あれば最初の1件のみ使う
            if name in seen:
                logger.warning(
                    "同じ試合に同名のプレイヤーがいるため2件目以降を除外: %s (%s)",
                    name,
                    game.name,
                )
                continue
            seen.add(name)
            entries = totals.setdefault(name, [])
            if not is_complete(result):
                logger.debug(
                    "18ホール未完了のため平均から除外: %s (%s, %s)",
                    name,
                    game.name,
                    result.through,
                )
                continue
            entries.append(
                GameTotal(
                    game_id=game.id,
                    game_name=game.name,
                    game_date=game.date,
                    total=result.total,
                )
            )

    averages = []
    for name, game_totals in totals.items():
        average = None
        if game_totals:
            mean = Decimal(sum(g.total for g in game_totals)) / len(game_totals)
            average = round_half_up(mean)
        averages.append(
            PlayerAverage(
                name=name,
                average=average,
                game_count=len(game_totals),
                games=game_totals,
            )
        )
    return averages
