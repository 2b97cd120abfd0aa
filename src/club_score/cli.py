"""CLIエントリーポイントモジュール

コマンドラインからリーダーボード・統計の表示と出力を行うためのインターフェース。
"""

import argparse
import getpass
import logging
import sys
from pathlib import Path

from . import __version__
from .aggregator import player_averages
from .auth import AuthError, verify_admin_password
from .config import Settings, get_settings
from .leaderboard import build_leaderboard, format_leaderboard, format_statistics
from .models import GameView
from .normalizer import NameNormalizer
from .output import (
    SnapshotError,
    export_statistics_to_excel,
    load_games_from_json,
    save_leaderboard_to_json,
)


def setup_logging(debug: bool = False) -> None:
    """ロギングを設定する

    Args:
        debug: デバッグモードの場合True
    """
    level = logging.DEBUG if debug else logging.INFO
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """コマンドライン引数をパースする

    Args:
        argv: 引数リスト(省略時はsys.argv)

    Returns:
        argparse.Namespace: パース済み引数
    """
    parser = argparse.ArgumentParser(
        prog="club-score",
        description="ゴルフ会の試合スコアからリーダーボードと統計を作成するツール",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="デバッグモードを有効にする",
    )

    parser.add_argument(
        "--data",
        type=Path,
        default=None,
        help="試合データのJSONファイル(デフォルト: 環境変数DATA_FILEまたはdata/games.json)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    leaderboard_parser = subparsers.add_parser("leaderboard", help="試合のリーダーボードを表示する")
    leaderboard_parser.add_argument(
        "--game",
        "-g",
        type=str,
        default=None,
        help="試合ID(省略時は最新の試合)",
    )
    leaderboard_parser.add_argument(
        "--json",
        action="store_true",
        help="リーダーボードをJSONファイルにも保存する",
    )

    stats_parser = subparsers.add_parser("stats", help="全試合のプレイヤー統計を表示する")
    stats_parser.add_argument(
        "--excel",
        action="store_true",
        help="統計をExcelファイルにも出力する",
    )

    for sub in (leaderboard_parser, stats_parser):
        sub.add_argument(
            "--output",
            "-o",
            type=Path,
            default=None,
            help="出力ディレクトリ(デフォルト: 環境変数OUTPUT_DIRまたはoutput)",
        )
        sub.add_argument(
            "--filename",
            "-f",
            type=str,
            default=None,
            help="出力ファイル名(省略時は自動生成)",
        )

    subparsers.add_parser("login", help="管理者パスワードを確認する")

    return parser.parse_args(argv)


def _select_game(games: list[GameView], game_id: str | None) -> GameView | None:
    if game_id is not None:
        return next((g for g in games if g.id == game_id), None)
    # 開催日が新しい試合(同日はファイル内で先のもの)
    return max(games, key=lambda g: g.date, default=None)


def run_leaderboard(args: argparse.Namespace, settings: Settings, games: list[GameView]) -> int:
    """leaderboardサブコマンド"""
    logger = logging.getLogger(__name__)

    game = _select_game(games, args.game)
    if game is None:
        logger.error("試合が見つかりません: %s", args.game or "(データなし)")
        return 1

    leaderboard = build_leaderboard(game)
    print(format_leaderboard(leaderboard))

    if args.json:
        output_path = save_leaderboard_to_json(
            leaderboard,
            args.output or settings.output_dir,
            args.filename,
        )
        logger.info("完了: %s", output_path)
    return 0


def run_stats(args: argparse.Namespace, settings: Settings, games: list[GameView]) -> int:
    """statsサブコマンド"""
    logger = logging.getLogger(__name__)

    if not games:
        logger.warning("集計できる試合がありませんでした")
        return 0

    averages = player_averages(games, NameNormalizer(settings.player_alias_file))
    print(format_statistics(averages, games))

    if args.excel:
        output_path = export_statistics_to_excel(
            averages,
            games,
            args.output or settings.output_dir,
            args.filename,
        )
        logger.info("完了: %s", output_path)
    return 0


def run_login(settings: Settings) -> int:
    """loginサブコマンド"""
    logger = logging.getLogger(__name__)

    password = getpass.getpass("管理者パスワード: ")
    try:
        verify_admin_password(password, settings)
    except AuthError as e:
        logger.error("認証に失敗しました: %s", e)
        return 1
    print("認証に成功しました")
    return 0


def main(argv: list[str] | None = None) -> int:
    """メインエントリーポイント

    Returns:
        int: 終了コード(0: 成功, 1: 失敗)
    """
    args = parse_args(argv)

    # 設定を読み込み
    try:
        settings = get_settings()
    except Exception as e:
        print(f"設定の読み込みに失敗しました: {e}", file=sys.stderr)
        print("環境変数または.envファイルを確認してください。", file=sys.stderr)
        return 1

    # コマンドライン引数で設定を上書き
    overrides = {}
    if args.debug:
        overrides["debug"] = True
    if args.data is not None:
        overrides["data_file"] = args.data
    if overrides:
        settings = settings.model_copy(update=overrides)

    # ロギング設定
    setup_logging(settings.debug)
    logger = logging.getLogger(__name__)

    logger.debug("club-score v%s を開始します", __version__)

    if args.command == "login":
        return run_login(settings)

    try:
        games = load_games_from_json(settings.data_file, settings.pairing_sides)
        if args.command == "leaderboard":
            return run_leaderboard(args, settings, games)
        return run_stats(args, settings, games)
    except (FileNotFoundError, SnapshotError) as e:
        logger.error("試合データを読み込めませんでした: %s", e)
        return 1
    except Exception as e:
        logger.exception("予期しないエラーが発生しました: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
