"""ゴルフ会スコア集計ツール

試合ごとのホール別スコアから、リーダーボード・チーム合計・アップダウン・
複数試合にまたがる統計を計算する。
"""

__version__ = "0.1.0"
