"""
クイズ全体で使う定数
"""

# 牌は 1〜9 の数字のみ（萬子一色）
TILE_RANKS = tuple(range(1, 10))
COPIES_PER_TILE = 4

# 手牌生成
DEFAULT_HAND_SIZE = 13
HAND_SIZES = (7, 10, 13)
MAX_ATTEMPTS = 500

# 生成に失敗したときに返す固定のテンパイ形（枚数ごと）
FALLBACK_HANDS = {
	7: (1, 1, 1, 2, 3, 4, 5),
	10: (1, 1, 1, 2, 3, 4, 5, 6, 7, 8),
	13: (1, 1, 1, 2, 3, 4, 5, 6, 7, 8, 9, 9, 9),  # 九蓮宝燈
}

# 難易度ごとの出題条件
HAND_CONFIG = {
	'beginner': {'tiles': 7, 'min_waits': 1, 'max_waits': 5},
	'amateur': {'tiles': 10, 'min_waits': 1, 'max_waits': 5},
	'normal': {'tiles': 13, 'min_waits': 1, 'max_waits': 5},
	'expert': {'tiles': 13, 'min_waits': 3, 'max_waits': 7},
	'master': {'tiles': 13, 'min_waits': 5, 'max_waits': 9},
}
DIFFICULTIES = tuple(HAND_CONFIG.keys())

# モード
MODES = ('challenge', 'sprint', 'survival', 'practice')

LIVES = {
	'challenge': 3,
	'sprint': 99,
	'survival': 1,
	'practice': 99,
}

# 制限時間（秒）。0 は時間無制限
DURATION = {
	'challenge': 120,
	'sprint': 60,
	'survival': 0,
	'practice': 0,
}

# スコア計算
BASE_MULTIPLIER = 100
FAST_BONUS_MULTIPLIER = 0.3
FAST_THRESHOLD_BASE = 2  # 秒 + 待ちの数 * 1秒
TIME_BONUS_MULTIPLIER = 100
LIFE_BONUS_MULTIPLIER = 1000

CLEAR_BONUS = {
	'beginner': 2000,
	'amateur': 4000,
	'normal': 6000,
	'expert': 8000,
	'master': 10000,
}

# チャレンジモードのクリア条件（正解数）
CLEAR_COUNT = 10
