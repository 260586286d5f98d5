"""Screen geometry for the Klondike board.

The engine's piles know nothing about pixels. A :class:`PileSlot` pins one
engine pile to a spot on screen and answers hit tests for it;
:class:`BoardLayout` arranges the thirteen slots in the classic shape
(stock, waste, gap, four foundations on top; seven columns below).
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import pygame

from klondike import common as C
from klondike.cards import Pile
from klondike.engine import PileView


class PileSlot:
    def __init__(self, pile: Pile, x: int = 0, y: int = 0, fan_y: int = 0):
        self.pile = pile
        self.x, self.y = x, y
        self.fan_y = fan_y

    def rect_for_index(self, idx: int) -> pygame.Rect:
        return pygame.Rect(self.x, self.y + idx * self.fan_y, C.CARD_W, C.CARD_H)

    def top_rect(self) -> pygame.Rect:
        if not self.pile.cards:
            return pygame.Rect(self.x, self.y, C.CARD_W, C.CARD_H)
        return self.rect_for_index(len(self.pile.cards) - 1)

    def drop_rect(self) -> pygame.Rect:
        """Whole area covered by the pile, used when something is dropped on it."""
        return self.rect_for_index(0).union(self.top_rect())

    def hit(self, pos: Tuple[int, int]) -> Optional[int]:
        """Index of the card under ``pos``; -1 for an empty pile's outline, None for a miss."""
        if not self.pile.cards:
            r = pygame.Rect(self.x, self.y, C.CARD_W, C.CARD_H)
            return -1 if r.collidepoint(pos) else None
        for i in reversed(range(len(self.pile.cards))):
            if self.rect_for_index(i).collidepoint(pos):
                return i
        return None

    def draw(self, screen: pygame.Surface, view: PileView, lifted: int = 0):
        """Paint ``view`` (the pile as last reported by the engine), minus its top ``lifted`` cards."""
        pygame.draw.rect(
            screen,
            (255, 255, 255),
            (self.x, self.y, C.CARD_W, C.CARD_H),
            border_radius=C.CARD_RADIUS,
            width=2,
        )
        for i, card in enumerate(view[:len(view) - lifted]):
            screen.blit(C.get_card_surface(*card), self.rect_for_index(i).topleft)


class BoardLayout:
    def __init__(self, game):
        self.game = game
        self.stock = PileSlot(game.stock)
        self.waste = PileSlot(game.waste)
        self.foundations = [PileSlot(f) for f in game.foundations]
        self.tableau = [PileSlot(t, fan_y=C.TABLEAU_FAN_Y) for t in game.tableau]
        self.compute()

    @property
    def slots(self) -> List[PileSlot]:
        return [self.stock, self.waste, *self.foundations, *self.tableau]

    def column_x(self, col: int) -> int:
        total_w = 7 * C.CARD_W + 6 * C.CARD_GAP_X
        left = max(40, (C.SCREEN_W - total_w) // 2)
        return left + col * (C.CARD_W + C.CARD_GAP_X)

    def compute(self):
        top_y = C.TOP_BAR_H + 40
        self.stock.x, self.stock.y = self.column_x(0), top_y
        self.waste.x, self.waste.y = self.column_x(1), top_y
        for i, f in enumerate(self.foundations):
            f.x, f.y = self.column_x(3 + i), top_y
        tab_y = top_y + C.CARD_H + C.CARD_GAP_Y + 14
        for i, t in enumerate(self.tableau):
            t.x, t.y = self.column_x(i), tab_y
            t.fan_y = C.TABLEAU_FAN_Y

    def slot_at(self, pos: Tuple[int, int]) -> Tuple[Optional[PileSlot], Optional[int]]:
        for slot in self.slots:
            hi = slot.hit(pos)
            if hi is not None:
                return slot, hi
        return None, None

    def drop_target(self, pos: Tuple[int, int]) -> Optional[Pile]:
        for slot in [*self.foundations, *self.tableau]:
            if slot.drop_rect().collidepoint(pos):
                return slot.pile
        return None
