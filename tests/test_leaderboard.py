"""leaderboard.pyのテスト"""

import json

from club_score.aggregator import player_averages
from club_score.leaderboard import build_leaderboard, format_leaderboard, format_statistics
from club_score.models import GameView, ScoreCategory


class TestBuildLeaderboard:
    """build_leaderboard関数のテスト"""

    def test_ranked_players(self, sample_game: GameView):
        """合計の昇順で順位が付くこと"""
        leaderboard = build_leaderboard(sample_game)

        assert [(r.rank, r.player.name) for r in leaderboard.players] == [
            (1, "김철수"),
            (2, "박민수"),
            (3, "이영희"),
            (4, "최지훈"),
        ]

    def test_team_rows_with_up_down(self, sample_game: GameView):
        """チーム行にアップダウンのポイントが入ること"""
        leaderboard = build_leaderboard(sample_game)

        assert [(r.team.team_label, r.team.total, r.up_down) for r in leaderboard.teams] == [
            ("A", 18, 10),
            ("B", 18, 10),
        ]

    def test_team_without_pairing(self, sample_game_record):
        """ペアリングに含まれないチームのアップダウンはNoneになること"""
        sample_game_record["pairings"] = []
        leaderboard = build_leaderboard(GameView.from_record(sample_game_record))

        assert all(r.up_down is None for r in leaderboard.teams)
        assert leaderboard.pairings == []

    def test_category_summary(self, sample_game: GameView):
        """スコア分類サマリーが件数の多い順に並ぶこと"""
        summary = build_leaderboard(sample_game).category_summary

        assert [(e.name, e.count, e.holes) for e in summary[ScoreCategory.BIRDIE]] == [
            ("김철수", 1, [1]),
        ]
        assert [(e.name, e.count) for e in summary[ScoreCategory.PAR]] == [
            ("박민수", 18),
            ("김철수", 16),
        ]
        assert [(e.name, e.count) for e in summary[ScoreCategory.BOGEY]] == [
            ("이영희", 18),
            ("김철수", 1),
        ]
        assert summary[ScoreCategory.EAGLE] == []
        assert ScoreCategory.DOUBLE_BOGEY not in summary

    def test_to_dict_json_compatible(self, sample_game: GameView):
        """to_dict()の結果がJSON互換であること"""
        result = build_leaderboard(sample_game).to_dict()

        restored = json.loads(json.dumps(result, ensure_ascii=False))

        assert restored["game_date"] == "2025-07-20"
        assert restored["players"][0]["player"]["name"] == "김철수"
        assert "birdie" in restored["category_summary"]


class TestFormatLeaderboard:
    """format_leaderboard関数のテスト"""

    def test_format(self, sample_game: GameView):
        """個人・チーム・分類サマリーが含まれること"""
        text = format_leaderboard(build_leaderboard(sample_game))

        assert "# 7월 월례회 (2025-07-20)" in text
        assert "1 | 김철수 | 1조 | A | 18/18 | 0" in text
        assert "4 | 최지훈 | 1조 | B | 9/18 | 18" in text
        assert "1조 | A | 김철수, 이영희 | 18 | 10" in text
        assert "[バーディー]" in text
        assert "- 김철수 1個 (Hole 1)" in text

    def test_unknown_team_and_no_pairing(self):
        """チーム不明・ペアリングなしは記号で表示されること"""
        game = GameView(
            id="g1",
            name="연습",
            date="2025-07-20",
            players=[{"id": "1", "name": "a", "scores": [{"hole_number": 1, "score": 2}]}],
        )

        text = format_leaderboard(build_leaderboard(game))

        assert "1 | a | - | - | 1/18 | 2" in text
        assert "- | - | a | 2 | N/A" in text
        assert "## スコア分類" not in text


class TestFormatStatistics:
    """format_statistics関数のテスト"""

    def test_format(self, sample_game: GameView, second_game: GameView):
        """平均・参加試合数・試合別スコアが表示されること"""
        games = [second_game, sample_game]
        text = format_statistics(player_averages(games), games)
        lines = text.splitlines()

        assert lines[0] == (
            "プレイヤー | 平均スコア | 参加試合数 | 7월 월례회 (2025-07-20) | 6월 월례회 (2025-06-15)"
        )
        assert lines[1] == "김철수 | 9.0 | 2 | 0 | 18"
        assert "박민수 | 0.0 | 1 | 0 | " in lines
        assert "최지훈 | N/A | 0 |  | " in lines
