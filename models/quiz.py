"""
待ち当てクイズの進行管理
"""
import logging
import math
import random
import time
from typing import Any, Callable, Dict, List, Optional

from logic.agari import enumerate_waits
from logic.generator import generate_hand, options_for_difficulty
from models.constants import (
	BASE_MULTIPLIER,
	CLEAR_BONUS,
	CLEAR_COUNT,
	DIFFICULTIES,
	DURATION,
	FAST_BONUS_MULTIPLIER,
	FAST_THRESHOLD_BASE,
	LIFE_BONUS_MULTIPLIER,
	LIVES,
	MODES,
	TILE_RANKS,
	TIME_BONUS_MULTIPLIER,
)
from models.hand import Hand

logger = logging.getLogger(__name__)


class QuizStateError(RuntimeError):
	"""対局中でないときの操作など、クイズの状態に合わない呼び出し"""


class QuizSession:
	"""待ち当てクイズ1回分の状態を管理するクラス"""

	def __init__(
		self,
		clock: Callable[[], float] = time.time,
		rng: Optional[random.Random] = None,
	):
		"""
		Args:
			clock: 現在時刻（秒）を返す関数
			rng: 手牌生成に使う乱数生成器
		"""
		self._clock = clock
		self._rng = rng
		self.mode = 'challenge'
		self.difficulty = 'normal'
		self.is_playing = False
		self.is_game_over = False
		self.is_clear = False
		self.score = 0
		self.lives = LIVES['challenge']
		self.time_left = 0
		self.game_end_time = 0.0
		self.hand = Hand()
		self.current_waits: List[int] = []
		self.selected_waits: List[int] = []
		self.question_start_time = 0.0
		self.answered = False
		self.correct_count = 0
		self.last_score_breakdown: Optional[Dict[str, int]] = None

	def start_game(self, mode: str, difficulty: str) -> None:
		"""新しいクイズを開始して最初の問題を出す"""
		if mode not in MODES:
			raise ValueError(f"Unknown mode: {mode!r}")
		if difficulty not in DIFFICULTIES:
			raise ValueError(f"Unknown difficulty: {difficulty!r}")

		duration = DURATION[mode]
		self.mode = mode
		self.difficulty = difficulty
		self.is_playing = True
		self.is_game_over = False
		self.is_clear = False
		self.score = 0
		self.lives = LIVES[mode]
		self.time_left = duration
		self.game_end_time = self._clock() + duration if duration else 0.0
		self.correct_count = 0
		self.last_score_breakdown = None
		logger.info("quiz started: mode=%s difficulty=%s", mode, difficulty)
		self.next_hand()

	def next_hand(self) -> List[int]:
		"""次の問題を出す"""
		self._require_playing()
		tiles = generate_hand(options_for_difficulty(self.difficulty), rng=self._rng)
		self.hand = Hand(tiles)
		self.current_waits = enumerate_waits(tiles)
		self.selected_waits = []
		self.answered = False
		self.question_start_time = self._clock()
		return self.hand.to_list()

	def toggle_wait(self, tile: int) -> List[int]:
		"""待ち牌の選択を切り替える"""
		self._require_playing()
		if isinstance(tile, bool) or tile not in TILE_RANKS:
			raise ValueError(f"Invalid tile: {tile!r}")
		if tile in self.selected_waits:
			self.selected_waits = [t for t in self.selected_waits if t != tile]
		else:
			self.selected_waits = sorted(self.selected_waits + [tile])
		return list(self.selected_waits)

	def submit_answer(self) -> Dict[str, Any]:
		"""
		選択した待ち牌で解答する

		Returns:
			{
				'correct': bool,
				'correct_waits': List[int],
				'points': int,
				'fast_bonus': int,
				'bonuses': List[str],   # 'FAST' など
			}
		"""
		self._require_playing()
		if self.answered:
			raise QuizStateError('This question has already been answered')
		self.answered = True

		if sorted(self.selected_waits) != self.current_waits:
			if self.mode != 'practice':
				self.lives -= 1
			if self.lives <= 0:
				self.end_game()
			return {
				'correct': False,
				'correct_waits': list(self.current_waits),
				'points': 0,
				'fast_bonus': 0,
				'bonuses': [],
			}

		time_spent = self._clock() - self.question_start_time
		wait_count = len(self.current_waits)
		base_score = wait_count * BASE_MULTIPLIER
		fast_threshold = FAST_THRESHOLD_BASE + wait_count
		fast_bonus = math.floor(base_score * FAST_BONUS_MULTIPLIER) if time_spent <= fast_threshold else 0
		points = base_score + fast_bonus

		self.score += points
		self.correct_count += 1

		if self.mode == 'challenge' and self.correct_count >= CLEAR_COUNT:
			self._apply_clear_bonus()
			self.end_game()

		return {
			'correct': True,
			'correct_waits': list(self.current_waits),
			'points': points,
			'fast_bonus': fast_bonus,
			'bonuses': ['FAST'] if fast_bonus > 0 else [],
		}

	def tick(self) -> int:
		"""残り時間を更新する（時間制限のあるモードのみ）"""
		if not self.is_playing or not self.game_end_time:
			return self.time_left
		remaining = max(0, math.ceil(self.game_end_time - self._clock()))
		self.time_left = remaining
		if remaining <= 0:
			self.end_game()
		return remaining

	def end_game(self, force_clear: bool = False) -> None:
		"""クイズを終了する。force_clear ならクリア扱いでボーナスを加算"""
		if force_clear:
			self._apply_clear_bonus()
		elif not (self.is_clear and self.last_score_breakdown):
			self.last_score_breakdown = {
				'base_score': self.score,
				'clear_bonus': 0,
				'life_bonus': 0,
				'time_bonus': 0,
				'total_score': self.score,
			}
		self.is_playing = False
		self.is_game_over = True
		logger.info(
			"quiz ended: mode=%s difficulty=%s correct=%d score=%d clear=%s",
			self.mode, self.difficulty, self.correct_count, self.score, self.is_clear,
		)

	def _apply_clear_bonus(self) -> None:
		if self.game_end_time:
			self.time_left = max(0, math.ceil(self.game_end_time - self._clock()))
		time_bonus = self.time_left * TIME_BONUS_MULTIPLIER
		life_bonus = self.lives * LIFE_BONUS_MULTIPLIER
		clear_bonus = CLEAR_BONUS[self.difficulty]
		base_score = self.score
		total_score = base_score + time_bonus + life_bonus + clear_bonus
		self.score = total_score
		self.is_clear = True
		self.last_score_breakdown = {
			'base_score': base_score,
			'clear_bonus': clear_bonus,
			'life_bonus': life_bonus,
			'time_bonus': time_bonus,
			'total_score': total_score,
		}

	def _require_playing(self) -> None:
		if not self.is_playing:
			raise QuizStateError('No quiz in progress')

	def to_json_serializable(self) -> Dict[str, Any]:
		"""セッション保存用の辞書"""
		return {
			'mode': self.mode,
			'difficulty': self.difficulty,
			'is_playing': self.is_playing,
			'is_game_over': self.is_game_over,
			'is_clear': self.is_clear,
			'score': self.score,
			'lives': self.lives,
			'time_left': self.time_left,
			'game_end_time': self.game_end_time,
			'hand': self.hand.to_list(),
			'current_waits': list(self.current_waits),
			'selected_waits': list(self.selected_waits),
			'question_start_time': self.question_start_time,
			'answered': self.answered,
			'correct_count': self.correct_count,
			'last_score_breakdown': self.last_score_breakdown,
		}

	@classmethod
	def from_dict(
		cls,
		data: Dict[str, Any],
		clock: Callable[[], float] = time.time,
		rng: Optional[random.Random] = None,
	) -> 'QuizSession':
		"""to_json_serializable の結果から復元"""
		quiz = cls(clock=clock, rng=rng)
		quiz.mode = data.get('mode', 'challenge')
		quiz.difficulty = data.get('difficulty', 'normal')
		quiz.is_playing = data.get('is_playing', False)
		quiz.is_game_over = data.get('is_game_over', False)
		quiz.is_clear = data.get('is_clear', False)
		quiz.score = data.get('score', 0)
		quiz.lives = data.get('lives', LIVES['challenge'])
		quiz.time_left = data.get('time_left', 0)
		quiz.game_end_time = data.get('game_end_time', 0.0)
		quiz.hand = Hand(data.get('hand', []))
		quiz.current_waits = list(data.get('current_waits', []))
		quiz.selected_waits = list(data.get('selected_waits', []))
		quiz.question_start_time = data.get('question_start_time', 0.0)
		quiz.answered = data.get('answered', False)
		quiz.correct_count = data.get('correct_count', 0)
		quiz.last_score_breakdown = data.get('last_score_breakdown')
		return quiz
