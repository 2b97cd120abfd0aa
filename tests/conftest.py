"""テスト共通のフィクスチャ"""

from typing import Any

import pytest

from club_score.models import GameView


def hole_scores(values: dict[int, int]) -> list[dict[str, int]]:
    """{ホール番号: スコア} からスコアレコードのリストを作る"""
    return [{"hole_number": h, "score": s} for h, s in values.items()]


def full_round(score: int = 0, **overrides: int) -> list[dict[str, int]]:
    """18ホール分のスコアレコードを作る(overridesは hole_3=-1 の形式)"""
    values = {h: score for h in range(1, 19)}
    for key, value in overrides.items():
        values[int(key.removeprefix("hole_"))] = value
    return hole_scores(values)


@pytest.fixture
def sample_game_record() -> dict[str, Any]:
    """ストア形式の試合レコード(1組、A対B)

    김철수: 1番バーディー、2番ボギー、残りパー → 0 (18ホール)
    이영희: 全ホールボギー → 18 (18ホール)
    박민수: 全ホールパー → 0 (18ホール)
    최지훈: 1〜9番ダブルボギー → 18 (9ホール)
    """
    return {
        "id": "g1",
        "name": "7월 월례회",
        "date": "2025-07-20T00:00:00+00:00",
        "teams": [
            {
                "id": 10,
                "name": "1조",
                "team_players": [
                    {
                        "id": 100,
                        "team_name": "A",
                        "player": {"id": "p1", "name": "김철수"},
                        "scores": full_round(0, hole_1=-1, hole_2=1),
                    },
                    {
                        "id": 101,
                        "team_name": "A",
                        "player": {"id": "p2", "name": "이영희"},
                        "scores": full_round(1),
                    },
                    {
                        "id": 102,
                        "team_name": "B",
                        "player": {"id": "p3", "name": "박민수"},
                        "scores": full_round(0),
                    },
                    {
                        "id": 103,
                        "team_name": "B",
                        "player": {"id": "p4", "name": "최지훈"},
                        "scores": hole_scores({h: 2 for h in range(1, 10)}),
                    },
                ],
            }
        ],
    }


@pytest.fixture
def sample_game(sample_game_record: dict[str, Any]) -> GameView:
    """サンプル試合のGameView"""
    return GameView.from_record(sample_game_record)


@pytest.fixture
def second_game_record() -> dict[str, Any]:
    """2試合目(古い日付)のストア形式レコード

    김철수: 全ホールボギー → 18 (18ホール)
    박민수: 17ホールのみ → 平均の対象外
    """
    return {
        "id": "g0",
        "name": "6월 월례회",
        "date": "2025-06-15",
        "teams": [
            {
                "id": 9,
                "name": "1조",
                "team_players": [
                    {
                        "id": 90,
                        "team_name": "A",
                        "player": {"id": "p1", "name": "김철수"},
                        "scores": full_round(1),
                    },
                    {
                        "id": 91,
                        "team_name": "B",
                        "player": {"id": "p3", "name": "박민수"},
                        "scores": hole_scores({h: 0 for h in range(1, 18)}),
                    },
                ],
            }
        ],
    }


@pytest.fixture
def second_game(second_game_record: dict[str, Any]) -> GameView:
    """2試合目のGameView"""
    return GameView.from_record(second_game_record)
