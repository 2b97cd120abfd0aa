"""入出力処理モジュール

試合データのスナップショット(JSON)を読み込み、
リーダーボードをJSONに、統計をExcelファイルに出力する。
"""

import json
import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter
from pydantic import ValidationError

from .leaderboard import NOT_AVAILABLE
from .models import DEFAULT_PAIRING_SIDES, GameView, Leaderboard, PlayerAverage

logger = logging.getLogger(__name__)

STATISTICS_SHEET_TITLE = "全記録"


class SnapshotError(Exception):
    """スナップショットファイルの形式が不正な場合の例外"""

    pass


def load_games_from_json(
    file_path: Path,
    pairing_sides: Sequence[tuple[str, str]] = DEFAULT_PAIRING_SIDES,
) -> list[GameView]:
    """スナップショットファイルから試合データを読み込む

    ファイルは試合レコードのリスト、または {"games": [...]} 形式。
    検証に失敗した試合はエラーログを出してスキップし、残りの試合は読み込む。

    Args:
        file_path: JSONファイルのパス
        pairing_sides: 対戦させるチームラベルの組み合わせ

    Returns:
        list[GameView]: 試合データのリスト(ファイル内の順序)

    Raises:
        SnapshotError: JSONとして読めない、または構造が不正な場合
    """
    with file_path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"JSONの解析に失敗しました: {file_path}") from e

    if isinstance(data, dict):
        data = data.get("games")
    if not isinstance(data, list):
        raise SnapshotError(f"試合レコードのリストが見つかりません: {file_path}")

    games = []
    for record in data:
        if not isinstance(record, dict):
            logger.error("試合レコードの形式が不正なためスキップしました: %r", record)
            continue
        try:
            games.append(GameView.from_record(record, pairing_sides))
        except ValidationError as e:
            logger.error(
                "試合データの検証に失敗したためスキップしました: id=%s (%s)",
                record.get("id"),
                e,
            )

    logger.info("試合データを読み込みました: %s (%d件)", file_path, len(games))
    return games


def save_leaderboard_to_json(
    leaderboard: Leaderboard,
    output_dir: Path,
    filename: str | None = None,
) -> Path:
    """リーダーボードをJSONファイルに保存する

    Args:
        leaderboard: リーダーボード
        output_dir: 出力ディレクトリ
        filename: ファイル名(省略時は自動生成)

    Returns:
        Path: 保存したファイルのパス
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    if filename is None:
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        filename = f"leaderboard_{timestamp}.json"

    output_path = output_dir / filename

    with output_path.open("w", encoding="utf-8") as f:
        json.dump(leaderboard.to_dict(), f, ensure_ascii=False, indent=2)

    logger.info(
        "リーダーボードを保存しました: %s (%d人)", output_path, len(leaderboard.players)
    )
    return output_path


def export_statistics_to_excel(
    averages: Sequence[PlayerAverage],
    games: Sequence[GameView],
    output_dir: Path,
    filename: str | None = None,
) -> Path:
    """プレイヤー統計をExcelファイルに出力する

    列はプレイヤー、平均スコア、参加試合数、試合ごとのスコア(新しい試合から)。

    Args:
        averages: プレイヤー統計
        games: 統計の対象とした試合
        output_dir: 出力ディレクトリ
        filename: ファイル名(省略時は自動生成)

    Returns:
        Path: 保存したファイルのパス
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    if filename is None:
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        filename = f"golf_statistics_{timestamp}.xlsx"

    output_path = output_dir / filename
    ordered_games = sorted(games, key=lambda g: g.date, reverse=True)

    wb = Workbook()
    ws = wb.active
    ws.title = STATISTICS_SHEET_TITLE

    headers = ["プレイヤー", "平均スコア", "参加試合数"] + [
        f"{g.name} ({g.date.isoformat()})" for g in ordered_games
    ]
    ws.append(headers)
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")

    for stat in averages:
        by_game = {g.game_id: g.total for g in stat.games}
        ws.append(
            [
                stat.name,
                NOT_AVAILABLE if stat.average is None else stat.average,
                stat.game_count,
            ]
            + [by_game.get(g.id) for g in ordered_games]
        )

    # 列幅を内容に合わせる
    for col_idx in range(1, len(headers) + 1):
        max_len = max(
            len(str(ws.cell(row=r, column=col_idx).value or ""))
            for r in range(1, ws.max_row + 1)
        )
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max(max_len + 2, 10), 40)

    wb.save(output_path)

    logger.info("統計を出力しました: %s (%d人)", output_path, len(averages))
    return output_path
