"""
出題用の手牌生成
"""
import logging
import random
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Mapping, Optional

from logic.agari import enumerate_waits
from models.constants import (
	DEFAULT_HAND_SIZE,
	FALLBACK_HANDS,
	HAND_CONFIG,
	HAND_SIZES,
	MAX_ATTEMPTS,
)
from models.tile_utils import build_pool, sort_hand

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandGenerationOptions:
	"""
	手牌生成の条件

	設定された条件はすべて AND で評価する（矛盾する組み合わせも特別扱いしない）
	"""
	min_waits: Optional[int] = None
	max_waits: Optional[int] = None
	exact_waits: Optional[int] = None
	tiles: int = DEFAULT_HAND_SIZE

	def __post_init__(self):
		for name in ('min_waits', 'max_waits', 'exact_waits'):
			value = getattr(self, name)
			if value is None:
				continue
			if isinstance(value, bool) or not isinstance(value, int):
				raise ValueError(f"{name} must be an integer")
			if name != 'exact_waits' and value < 0:
				raise ValueError(f"{name} must be >= 0")
		if isinstance(self.tiles, bool) or not isinstance(self.tiles, int) or self.tiles not in HAND_SIZES:
			raise ValueError(f"tiles must be one of {HAND_SIZES}")

	@classmethod
	def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'HandGenerationOptions':
		"""辞書から生成する。未知のキーは ValueError"""
		data = dict(data or {})
		known = {f.name for f in fields(cls)}
		unknown = sorted(set(data) - known)
		if unknown:
			raise ValueError(f"Unknown option(s): {', '.join(unknown)}")
		return cls(**data)

	def to_dict(self) -> Dict[str, Any]:
		return {f.name: getattr(self, f.name) for f in fields(self)}

	def accepts(self, wait_count: int) -> bool:
		"""待ちの数が条件を満たすか（待ちなしは常に不可）"""
		if wait_count <= 0:
			return False
		if self.min_waits is not None and wait_count < self.min_waits:
			return False
		if self.max_waits is not None and wait_count > self.max_waits:
			return False
		if self.exact_waits is not None and wait_count != self.exact_waits:
			return False
		return True


def options_for_difficulty(difficulty: str) -> HandGenerationOptions:
	"""難易度名から生成条件を返す"""
	try:
		config = HAND_CONFIG[difficulty]
	except KeyError:
		raise ValueError(f"Unknown difficulty: {difficulty!r}") from None
	return HandGenerationOptions(**config)


def fallback_hand(tiles: int = DEFAULT_HAND_SIZE) -> List[int]:
	"""生成に失敗したときの固定テンパイ形（コピーを返す）"""
	return list(FALLBACK_HANDS[tiles])


def generate_hand(
	options: Optional[HandGenerationOptions] = None,
	rng: Optional[random.Random] = None,
) -> List[int]:
	"""
	条件を満たすテンパイの手牌をランダムに生成する

	MAX_ATTEMPTS 回まで山をシャッフルして配牌し直す。見つからなければ
	条件を無視した固定のテンパイ形を返す（例外は投げない）。

	Args:
		options: 生成条件（None なら13枚・条件なし）
		rng: 乱数生成器（None ならモジュールの random）

	Returns:
		昇順にソートされた手牌
	"""
	if options is None:
		options = HandGenerationOptions()

	for attempt in range(1, MAX_ATTEMPTS + 1):
		pool = build_pool(rng)
		candidate = sort_hand(pool[:options.tiles])
		waits = enumerate_waits(candidate)
		if options.accepts(len(waits)):
			logger.debug("generated %s (waits=%s) after %d attempt(s)", candidate, waits, attempt)
			return candidate

	logger.warning(
		"no hand satisfied %s within %d attempts; using fallback", options.to_dict(), MAX_ATTEMPTS
	)
	return fallback_hand(options.tiles)
