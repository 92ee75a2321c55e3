"""
牌操作ユーティリティ（萬子一色）
"""
import random
import re
from typing import List, Optional

from mahjong.tile import TilesConverter

from models.constants import TILE_RANKS, COPIES_PER_TILE


_HAND_TEXT = re.compile(r'^[1-9]+m?$')


def build_pool(rng: Optional[random.Random] = None) -> List[int]:
	"""
	1〜9 を4枚ずつ並べた36枚の山を生成してシャッフルする
	"""
	pool = []
	for t in TILE_RANKS:
		pool.extend([t] * COPIES_PER_TILE)
	(rng or random).shuffle(pool)
	return pool


def sort_hand(hand: List[int]) -> List[int]:
	"""手牌を昇順でソート"""
	return sorted(hand)


def hand_to_counts(hand: List[int]) -> List[int]:
	"""手牌をカウント配列に変換（9要素、index i-1 が i の枚数）"""
	counts = [0] * len(TILE_RANKS)
	for t in hand:
		if 1 <= t <= 9:
			counts[t - 1] += 1
	return counts


def has_valid_counts(counts: List[int]) -> bool:
	"""同じ牌が5枚以上ないか"""
	return all(0 <= c <= COPIES_PER_TILE for c in counts)


def format_hand_compact(hand: List[int]) -> str:
	"""
	手牌をコンパクト形式でフォーマット
	例: [1, 1, 1, 2, 3] -> "11123m"
	"""
	if not hand:
		return ''
	# 5枚目以降は TilesConverter が別の牌に読み替えてしまう
	if not has_valid_counts(hand_to_counts(hand)):
		return ''.join(str(t) for t in sort_hand(hand)) + 'm'
	tiles_136 = TilesConverter.string_to_136_array(man=''.join(str(t) for t in sort_hand(hand)))
	return TilesConverter.to_one_line_string(tiles_136)


def parse_hand(text: str) -> List[int]:
	"""
	文字列から手牌を読み込む

	"1112345678999", "1112345678999m", "1 1 1 2 ..." , "1,1,1,2,..." を受け付ける

	Raises:
		ValueError: 1〜9 以外の文字、5枚目の牌、空入力
	"""
	compact = re.sub(r'[\s,]+', '', text or '')
	if not _HAND_TEXT.match(compact):
		raise ValueError(f"Invalid hand: {text!r}")
	hand = [int(c) for c in compact.rstrip('m')]
	if not has_valid_counts(hand_to_counts(hand)):
		raise ValueError(f"Too many copies of a tile: {text!r}")
	return hand


def validate_hand(tiles) -> List[int]:
	"""
	JSON などから受け取った牌リストを検証して int のリストで返す

	Raises:
		ValueError: リストでない、1〜9 以外、5枚目の牌
	"""
	if not isinstance(tiles, (list, tuple)):
		raise ValueError('hand must be a list of tiles')
	hand = []
	for t in tiles:
		if isinstance(t, bool) or not isinstance(t, int) or t not in TILE_RANKS:
			raise ValueError(f"Invalid tile: {t!r}")
		hand.append(t)
	if not has_valid_counts(hand_to_counts(hand)):
		raise ValueError('Too many copies of a tile')
	return hand
