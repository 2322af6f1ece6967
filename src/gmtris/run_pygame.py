"""Simple pygame front-end for the simulation core.

The core never draws or reads devices; this module samples the keyboard once
per tick, feeds the resulting :class:`~gmtris.movement.Movement` to
:meth:`GameState.step` and draws the :class:`~gmtris.game_state.Snapshot`.

Controls: W/A/S/D move (W does nothing but is read first), H and K rotate
counter-clockwise, J rotates clockwise.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Mapping, Sequence, Tuple, Union

import pygame

from .board import Board
from .game_state import FPS, GameState, Snapshot
from .movement import Direction, Movement
from .tetromino import PIECE_VALUES, Piece, PieceType, Rotation


LOGGER = logging.getLogger(__name__)

# Size of a single board cell in pixels
CELL_SIZE = 20
BOARD_OFFSET_X = CELL_SIZE * 6
BOARD_OFFSET_Y = CELL_SIZE * 4
WINDOW_SIZE = (CELL_SIZE * 30, CELL_SIZE * 27)

SHAPE_COLORS = {
    PieceType.Z: (0, 255, 0),
    PieceType.S: (255, 0, 255),
    PieceType.T: (0, 128, 255),
    PieceType.L: (255, 128, 128),
    PieceType.J: (0, 0, 255),
    PieceType.O: (255, 255, 0),
    PieceType.I: (255, 0, 0),
}
GREY = (200, 200, 200)

CELL_COLORS = {0: (0, 0, 0)}
for shape, value in PIECE_VALUES.items():
    CELL_COLORS[value] = SHAPE_COLORS[shape]

# Checked in order; the first pressed key wins.
DIRECTION_KEYS: Tuple[Tuple[int, Direction], ...] = (
    (pygame.K_w, Direction.UP),
    (pygame.K_a, Direction.LEFT),
    (pygame.K_d, Direction.RIGHT),
    (pygame.K_s, Direction.DOWN),
)
ROTATION_KEYS: Tuple[Tuple[int, Rotation], ...] = (
    (pygame.K_h, Rotation.CCW),
    (pygame.K_j, Rotation.CW),
    (pygame.K_k, Rotation.CCW2),
)

Pressed = Union[Sequence[bool], Mapping[int, bool]]


def parse_movement(pressed: Pressed) -> Movement:
    """Translate the pressed-key table into this tick's movement."""

    direction = next((d for key, d in DIRECTION_KEYS if pressed[key]), None)
    rotation = next((r for key, r in ROTATION_KEYS if pressed[key]), None)
    return Movement(direction=direction, rotation=rotation)


def _cell_rect(col: int, row: int) -> pygame.Rect:
    # Board row 0 is the floor; the top row is hidden above the well.
    top = BOARD_OFFSET_Y + (Board.height - 2 - row) * CELL_SIZE
    return pygame.Rect(BOARD_OFFSET_X + col * CELL_SIZE, top, CELL_SIZE, CELL_SIZE)


def draw_board(screen: pygame.Surface, snap: Snapshot) -> None:
    """Render the locked cells, greying rows once the game is over."""

    height, width = snap.grid.shape
    for row in range(height - 1):
        for col in range(width):
            value = int(snap.grid[row, col])
            if not value:
                continue
            color = GREY if row < snap.greyed_rows else CELL_COLORS[value]
            pygame.draw.rect(screen, color, _cell_rect(col, row))
    outline = pygame.Rect(BOARD_OFFSET_X - 1, BOARD_OFFSET_Y - 1, width * CELL_SIZE + 2, (height - 1) * CELL_SIZE + 2)
    pygame.draw.rect(screen, (128, 128, 128), outline, 1)


def draw_piece(screen: pygame.Surface, piece: Piece) -> None:
    color = SHAPE_COLORS[piece.piece_type]
    for row, col in piece.blocks():
        if row < Board.height - 1:
            pygame.draw.rect(screen, color, _cell_rect(col, row))


def draw_preview(screen: pygame.Surface, piece_type: PieceType) -> None:
    preview = Piece.spawn(piece_type)
    color = SHAPE_COLORS[piece_type]
    for r, line in enumerate(preview.shape):
        for c, filled in enumerate(line):
            if filled:
                rect = pygame.Rect(
                    BOARD_OFFSET_X + (preview.x + c) * CELL_SIZE,
                    BOARD_OFFSET_Y - (4 - r) * CELL_SIZE,
                    CELL_SIZE,
                    CELL_SIZE,
                )
                pygame.draw.rect(screen, color, rect)


def draw_hud(screen: pygame.Surface, font: pygame.font.Font, snap: Snapshot) -> None:
    x = BOARD_OFFSET_X + (Board.width + 2) * CELL_SIZE
    lines = [f"grade {snap.grade}", f"score {snap.score}", f"level {snap.level}"]
    if snap.lock_delay_remaining is not None:
        lines.insert(0, f"lock {snap.lock_delay_remaining}")
    for i, text in enumerate(lines):
        screen.blit(font.render(text, True, (255, 255, 255)), (x, BOARD_OFFSET_Y + i * 2 * CELL_SIZE))


def draw(screen: pygame.Surface, font: pygame.font.Font, snap: Snapshot) -> None:
    screen.fill((0, 0, 0))
    draw_board(screen, snap)
    draw_preview(screen, snap.next_piece)
    if snap.active is not None:
        draw_piece(screen, snap.active)
    draw_hud(screen, font, snap)


class GameRunner:
    """Drive a :class:`GameState` at a fixed 60 ticks per second.

    Ticks are paced by elapsed time, not by rendered frames: a slow frame is
    followed by as many ticks as fell due while it was drawn.
    """

    def __init__(self, state: GameState | None = None) -> None:
        self._running = False
        self._state = state
        self._tick_accum = 0.0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def state(self) -> GameState | None:
        return self._state

    async def _run_loop(self) -> None:
        pygame.init()
        screen = pygame.display.set_mode(WINDOW_SIZE)
        pygame.display.set_caption("gmtris")
        font = pygame.font.Font(None, 24)
        clock = pygame.time.Clock()

        if self._state is None:
            self._state = GameState()
        LOGGER.info("Game started")

        self._running = True
        while self.running:
            dt = clock.tick(FPS)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.stop()

            self.advance(dt, parse_movement(pygame.key.get_pressed()))
            draw(screen, font, self._state.snapshot())
            pygame.display.flip()

            # Yield to the host event loop
            await asyncio.sleep(0)

        pygame.quit()
        LOGGER.info("Game stopped")

    def advance(self, dt: float, movement: Movement) -> int:
        """Run every tick due after ``dt`` more milliseconds; return the count."""

        assert self._state is not None
        # Kept in ms x FPS so whole-millisecond frames add up exactly.
        self._tick_accum += dt * FPS
        ticks = 0
        while self._tick_accum >= 1000:
            self._tick_accum -= 1000
            self._state.step(movement)
            ticks += 1
        return ticks

    def stop(self) -> None:
        self._running = False

    def run(self) -> None:
        asyncio.run(self._run_loop())


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    GameRunner().run()


if __name__ == "__main__":  # pragma: no cover - manual execution only
    main()
