from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Tuple

from . import actions, settings as keys
from .generator import PieceGenerator
from .grid import dropped_position, update_blocks
from .pieces import EMPTY, Block, DropBlock, Matrix
from .rules import ScoringRules
from .settings import MemoryStore, Settings, SettingsStore, clamp_setting
from .sound import NullSound, SoundNotifier, SoundType
from .state import GameStatus, ViewState


logger = logging.getLogger(__name__)


class InvariantViolation(RuntimeError):
    """Engine state that can only come from a programming error."""


@dataclass
class GameConfig:
    random_seed: Optional[int] = None
    # Tick period at speed 1, in seconds; divided by the game speed.
    tick_base_interval: float = 1.928
    line_clear_delay: float = 0.1
    screen_clear_delay: float = 0.05
    line_clear_flashes: int = 5


@dataclass(frozen=True)
class Frame:
    """One animation step: publish ``state`` then wait ``delay`` seconds."""

    state: ViewState
    delay: float = 0.0


@dataclass(frozen=True)
class Transition:
    state: ViewState
    animation: Tuple[Frame, ...] = ()

    @property
    def final(self) -> ViewState:
        return self.animation[-1].state if self.animation else self.state


_FRESH_BOARD = dict(
    blocks=(),
    drop_block=EMPTY,
    drop_block_reserve=(),
    ghost_block=EMPTY,
    score=0,
    line=0,
)


class TetrominautsGame:
    """Pure game state machine.

    ``reduce`` maps the current snapshot and a command to a ``Transition``.
    It never mutates its input; the only side effects are sound cues and
    persisting settings through the store.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        store: Optional[SettingsStore] = None,
        sound: Optional[SoundNotifier] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.store = store if store is not None else MemoryStore()
        self.sound = sound or NullSound()
        self.rng = random.Random(self.config.random_seed)
        self.generator = PieceGenerator(self.rng)

    def initial_state(self) -> ViewState:
        return ViewState.from_settings(Settings.load(self.store))

    def reduce(self, state: ViewState, command: actions.Command) -> Transition:
        if isinstance(command, actions.Reset):
            return self._reset(state)
        elif isinstance(command, actions.Pause):
            return Transition(state.copy(game_status=GameStatus.PAUSED) if state.is_running else state)
        elif isinstance(command, actions.Resume):
            return Transition(state.copy(game_status=GameStatus.RUNNING) if state.is_paused else state)
        elif isinstance(command, actions.Move):
            if command.direction is actions.Direction.UP:
                return self._drop(state)
            return self._move(state, command.direction)
        elif isinstance(command, actions.Rotate):
            return self._rotate(state)
        elif isinstance(command, actions.Drop):
            return self._drop(state)
        elif isinstance(command, actions.GameTick):
            return self._tick(state)
        elif isinstance(command, actions.Mute):
            return self._toggle(state, keys.MUTE, "is_mute")
        elif isinstance(command, actions.DarkMode):
            return self._toggle(state, keys.DARK_MODE, "is_dark_mode")
        elif isinstance(command, actions.UseNauts):
            return self._toggle(state, keys.USE_NAUTS, "use_nauts")
        elif isinstance(command, actions.UseGhostBlock):
            return self._toggle(state, keys.USE_GHOST_BLOCK, "use_ghost_block")
        elif isinstance(command, actions.ShowGridOutline):
            return self._toggle(state, keys.SHOW_GRID_OUTLINE, "show_grid_outline")
        elif isinstance(command, actions.ShowBackgroundArt):
            return self._toggle(state, keys.SHOW_BACKGROUND_ART, "show_background_art")
        elif isinstance(command, actions.NautProbability):
            value = self._store_int(keys.NAUT_PROBABILITY, command.value)
            return Transition(state.copy(naut_probability=value))
        elif isinstance(command, actions.GameSpeed):
            value = self._store_int(keys.GAME_SPEED, command.value)
            return Transition(state.copy(game_speed=value))
        elif isinstance(command, actions.GridWidth):
            value = self._store_int(keys.GRID_WIDTH, command.value)
            return Transition(state.copy(grid_size=Matrix(value, state.grid_size.height)))
        elif isinstance(command, actions.GridHeight):
            value = self._store_int(keys.GRID_HEIGHT, command.value)
            return Transition(state.copy(grid_size=Matrix(state.grid_size.width, value)))
        raise TypeError(f"not a game command: {command!r}")

    # Game mechanics

    def _reset(self, state: ViewState) -> Transition:
        if state.game_status in (GameStatus.ONBOARD, GameStatus.GAME_OVER):
            return Transition(state.copy(game_status=GameStatus.RUNNING, matrix=state.grid_size, **_FRESH_BOARD))
        wipe = self._clear_screen(state)
        final = state.copy(game_status=GameStatus.ONBOARD, matrix=state.grid_size, **_FRESH_BOARD)
        return Transition(state.copy(game_status=GameStatus.SCREEN_CLEARING), wipe + (Frame(final),))

    def _move(self, state: ViewState, direction: actions.Direction) -> Transition:
        if not state.is_running:
            return Transition(state)
        self._play(state.is_mute, SoundType.MOVE)
        return Transition(self._commit_if_valid(state, state.drop_block.move_by(direction.offset)))

    def _rotate(self, state: ViewState) -> Transition:
        if not state.is_running:
            return Transition(state)
        self._play(state.is_mute, SoundType.ROTATE)
        return Transition(self._commit_if_valid(state, state.drop_block.rotate().adjust_offset(state.matrix)))

    def _drop(self, state: ViewState) -> Transition:
        if not state.is_running:
            return Transition(state)
        self._play(state.is_mute, SoundType.DROP)
        landed = dropped_position(state.drop_block, state.blocks, state.matrix)
        return Transition(state.copy(drop_block=landed, ghost_block=EMPTY))

    def _tick(self, state: ViewState) -> Transition:
        if not state.is_running:
            return Transition(state)

        if not state.drop_block.is_empty:
            fallen = state.drop_block.move_by(actions.Direction.DOWN.offset)
            if fallen.is_valid_in_matrix(state.blocks, state.matrix):
                return Transition(self._with_drop_block(state, fallen))

        if not state.drop_block.is_valid_in_matrix(state.blocks, state.matrix):
            return self._game_over(state)

        frames, cleared_lines = update_blocks(state.blocks, state.drop_block, state.matrix)
        next_block, reserve = self._next_drop_block(state)
        score = state.score + self.rules.calculate_score(cleared_lines)
        if not state.drop_block.is_empty:
            score += self.rules.drop_block_score
        settled = state.copy(
            game_status=GameStatus.RUNNING,
            blocks=frames.cleared,
            drop_block=next_block,
            drop_block_reserve=reserve,
            ghost_block=dropped_position(next_block, frames.cleared, state.matrix),
            score=score,
            line=state.line + cleared_lines,
        )
        if cleared_lines == 0:
            return Transition(settled)

        logger.debug("cleared %d line(s), score %d", cleared_lines, score)
        self._play(state.is_mute, SoundType.CLEAN)
        flashes = tuple(
            Frame(
                state.copy(
                    game_status=GameStatus.LINE_CLEARING,
                    drop_block=EMPTY,
                    ghost_block=EMPTY,
                    blocks=frames.pre_clear if i % 2 == 0 else frames.clearing,
                ),
                self.config.line_clear_delay,
            )
            for i in range(self.config.line_clear_flashes)
        )
        return Transition(state.copy(game_status=GameStatus.LINE_CLEARING), flashes + (Frame(settled),))

    def _game_over(self, state: ViewState) -> Transition:
        logger.debug("game over at score %d, %d line(s)", state.score, state.line)
        self._play(state.is_mute, SoundType.GAME_OVER)
        # Wipe silently so the game over cue is not cut off.
        silenced = state.copy(game_status=GameStatus.SCREEN_CLEARING, is_mute=True)
        wipe = self._clear_screen(silenced)
        final = wipe[-1].state.copy(game_status=GameStatus.GAME_OVER, is_mute=state.is_mute)
        return Transition(silenced, wipe + (Frame(final),))

    def _clear_screen(self, state: ViewState) -> Tuple[Frame, ...]:
        """Fill the board from the bottom up, then empty it from the top down."""
        self._play(state.is_mute, SoundType.START)
        width, height = state.matrix.width, state.matrix.height
        xs = range(width)
        delay = self.config.screen_clear_delay
        frames = []
        for y in range(height, -1, -1):
            frames.append(
                Frame(
                    state.copy(
                        game_status=GameStatus.SCREEN_CLEARING,
                        blocks=state.blocks + Block.fill(xs, range(y, height)),
                    ),
                    delay,
                )
            )
        for y in range(height + 1):
            frames.append(
                Frame(
                    state.copy(
                        game_status=GameStatus.SCREEN_CLEARING,
                        blocks=Block.fill(xs, range(y, height)),
                        drop_block=EMPTY,
                        ghost_block=EMPTY,
                    ),
                    delay,
                )
            )
        return tuple(frames)

    def _next_drop_block(self, state: ViewState) -> Tuple[DropBlock, Tuple[DropBlock, ...]]:
        reserve = state.drop_block_reserve or self._generate(state)
        next_block, rest = reserve[0], reserve[1:]
        return next_block, rest or self._generate(state)

    def _generate(self, state: ViewState) -> Tuple[DropBlock, ...]:
        batch = tuple(self.generator.generate(state.matrix, state.use_nauts, state.naut_probability))
        if not batch:
            raise InvariantViolation("piece generator returned an empty batch")
        return batch

    # Helpers

    def _with_drop_block(self, state: ViewState, drop_block: DropBlock) -> ViewState:
        return state.copy(
            drop_block=drop_block,
            ghost_block=dropped_position(drop_block, state.blocks, state.matrix),
        )

    def _commit_if_valid(self, state: ViewState, candidate: DropBlock) -> ViewState:
        if candidate.is_valid_in_matrix(state.blocks, state.matrix):
            return self._with_drop_block(state, candidate)
        return state

    def _toggle(self, state: ViewState, key: str, field: str) -> Transition:
        value = not getattr(state, field)
        self.store.set(key, value)
        return Transition(state.copy(**{field: value}))

    def _store_int(self, key: str, value: int) -> int:
        value = clamp_setting(key, value)
        self.store.set(key, value)
        return value

    def _play(self, muted: bool, kind: SoundType) -> None:
        try:
            self.sound.play(muted, kind)
        except Exception:
            logger.exception("sound notifier failed on %s", kind.value)
