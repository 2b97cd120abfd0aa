"""リーダーボードモジュール

集計結果とアップダウン結果をまとめ、表示用のリーダーボードを組み立てる。
"""

from collections.abc import Sequence

from .aggregator import aggregate_game, rank_players
from .models import (
    CategoryEntry,
    GameView,
    Leaderboard,
    PlayerAverage,
    RankedPlayer,
    ScoreCategory,
    TeamRow,
)
from .updown import compare_game, team_points

# サマリーに載せる分類(ダブルボギー以上は載せない)
SUMMARY_CATEGORIES = (
    ScoreCategory.ALBATROSS,
    ScoreCategory.EAGLE,
    ScoreCategory.BIRDIE,
    ScoreCategory.PAR,
    ScoreCategory.BOGEY,
)

NOT_AVAILABLE = "N/A"


def build_leaderboard(game: GameView) -> Leaderboard:
    """試合のリーダーボードを組み立てる

    Args:
        game: 試合データ

    Returns:
        Leaderboard: 順位付きプレイヤー、チーム行、アップダウン、スコア分類サマリー
    """
    result = aggregate_game(game)
    pairing_results = compare_game(game)
    points = team_points(pairing_results)

    ranked = [
        RankedPlayer(rank=index, player=player)
        for index, player in enumerate(rank_players(result.players), start=1)
    ]
    teams = [
        TeamRow(team=team, up_down=points.get((team.group_label, team.team_label)))
        for team in result.teams
    ]

    summary: dict[ScoreCategory, list[CategoryEntry]] = {}
    for category in SUMMARY_CATEGORIES:
        entries = [
            CategoryEntry(
                name=player.name,
                count=player.category_counts[category],
                holes=player.category_holes[category],
            )
            for player in result.players
            if player.category_counts[category] > 0
        ]
        summary[category] = sorted(entries, key=lambda e: e.count, reverse=True)

    return Leaderboard(
        game_id=game.id,
        game_name=game.name,
        game_date=game.date,
        players=ranked,
        teams=teams,
        pairings=pairing_results,
        category_summary=summary,
    )


def format_leaderboard(leaderboard: Leaderboard) -> str:
    """リーダーボードをテキスト表に整形する"""
    lines = [f"# {leaderboard.game_name} ({leaderboard.game_date.isoformat()})", ""]

    lines.append("## 個人スコア")
    lines.append("順位 | プレイヤー | 組 | チーム | Through | スコア")
    for row in leaderboard.players:
        p = row.player
        lines.append(
            f"{row.rank} | {p.name} | {p.group or '-'} | {p.team or '-'} | {p.through} | {p.total}"
        )
    lines.append("")

    lines.append("## チームスコア")
    lines.append("組 | チーム | メンバー | 合計 | アップダウン")
    for row in leaderboard.teams:
        t = row.team
        up_down = NOT_AVAILABLE if row.up_down is None else str(row.up_down)
        lines.append(
            f"{t.group_label or '-'} | {t.team_label or '-'} | "
            f"{', '.join(t.member_names)} | {t.total} | {up_down}"
        )

    summary_lines = []
    for category, entries in leaderboard.category_summary.items():
        if not entries:
            continue
        summary_lines.append(f"[{category.label}]")
        for entry in entries:
            holes = ", ".join(str(h) for h in entry.holes)
            summary_lines.append(f"- {entry.name} {entry.count}個 (Hole {holes})")
    if summary_lines:
        lines.append("")
        lines.append("## スコア分類")
        lines.extend(summary_lines)

    return "\n".join(lines)


def format_statistics(averages: Sequence[PlayerAverage], games: Sequence[GameView]) -> str:
    """複数試合の統計をテキスト表に整形する

    列はプレイヤー、平均スコア、参加試合数、試合ごとのスコア(新しい試合から)。
    18ホール未完了の試合は空欄になる。
    """
    ordered_games = sorted(games, key=lambda g: g.date, reverse=True)
    header = ["プレイヤー", "平均スコア", "参加試合数"] + [
        f"{g.name} ({g.date.isoformat()})" for g in ordered_games
    ]
    lines = [" | ".join(header)]
    for stat in averages:
        by_game = {g.game_id: g.total for g in stat.games}
        cells = [
            stat.name,
            NOT_AVAILABLE if stat.average is None else f"{stat.average:.1f}",
            str(stat.game_count),
        ] + [str(by_game[g.id]) if g.id in by_game else "" for g in ordered_games]
        lines.append(" | ".join(cells))
    return "\n".join(lines)
