"""The Klondike game engine.

:class:`KlondikeGame` owns the thirteen piles and is the only thing that
mutates them. The presentation layer talks to it through a handful of
commands (draw, select/drop, undo, new game) and listens for
:class:`GameEvent` notifications to know when to redraw.

Every mutating command snapshots the whole board *before* touching it, so
:meth:`KlondikeGame.undo` can put things back exactly. The history is not
capped.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from klondike.cards import (
    FOUNDATION,
    STOCK,
    TABLEAU,
    WASTE,
    Card,
    Pile,
    make_deck,
    shuffle_deck,
)
from klondike.rules import can_move, selectable_run

logger = logging.getLogger(__name__)

TABLEAU_COUNT = 7
FOUNDATION_COUNT = 4
DECK_SIZE = 52
FULL_FOUNDATION = 13

CardView = Tuple[str, int, bool]  # (suit, rank, face_up)
PileView = Tuple[CardView, ...]


class GameState(Enum):
    DEALING = "dealing"
    PLAYING = "playing"
    WON = "won"


@dataclass(frozen=True)
class Snapshot:
    """Immutable copy of every pile plus the move counter."""

    tableau: Tuple[PileView, ...]
    foundations: Tuple[PileView, ...]
    stock: PileView
    waste: PileView
    move_count: int


@dataclass(frozen=True, eq=False)
class SelectionHandle:
    """Cards picked up from ``source`` by one drag gesture."""

    source: Pile
    cards: Tuple[Card, ...]

    @property
    def lead(self) -> Card:
        return self.cards[0]


@dataclass(frozen=True)
class MoveResult:
    moved: bool
    reason: str = ""
    revealed: Optional[Card] = None
    won: bool = False

    def __bool__(self) -> bool:
        return self.moved


@dataclass(frozen=True)
class GameEvent:
    kind: str  # "changed" | "won"
    move_count: int
    state: GameState


Listener = Callable[[GameEvent], None]


def pile_view(pile: Pile) -> PileView:
    return tuple((c.suit, c.rank, c.face_up) for c in pile.cards)


def _rebuild(pile: Pile, view: PileView):
    pile.cards = [Card(suit, rank, face_up) for suit, rank, face_up in view]


class KlondikeGame:
    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None, deal: bool = True):
        self.tableau = [Pile(TABLEAU, i) for i in range(TABLEAU_COUNT)]
        self.foundations = [Pile(FOUNDATION, i) for i in range(FOUNDATION_COUNT)]
        self.stock = Pile(STOCK)
        self.waste = Pile(WASTE)
        self.move_count = 0
        self.history: List[Snapshot] = []
        self.selection: Optional[SelectionHandle] = None
        self.state = GameState.DEALING
        if rng is None:
            rng = random.Random(seed)
        elif seed is not None:
            rng.seed(seed)
        self.rng = rng
        self._listeners: List[Listener] = []
        self._win_announced = False
        self._initial_snapshot: Optional[Snapshot] = None
        if deal:
            self.new_game()

    # ---------- Observation ----------
    def all_piles(self) -> List[Pile]:
        return [self.stock, self.waste, *self.foundations, *self.tableau]

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, kind: str):
        event = GameEvent(kind, self.move_count, self.state)
        for listener in list(self._listeners):
            listener(event)

    @property
    def is_won(self) -> bool:
        return self.state is GameState.WON

    # ---------- Snapshots / undo ----------
    def snapshot(self) -> Snapshot:
        return Snapshot(
            tableau=tuple(pile_view(p) for p in self.tableau),
            foundations=tuple(pile_view(f) for f in self.foundations),
            stock=pile_view(self.stock),
            waste=pile_view(self.waste),
            move_count=self.move_count,
        )

    def restore(self, snap: Snapshot):
        for p, view in zip(self.tableau, snap.tableau):
            _rebuild(p, view)
        for f, view in zip(self.foundations, snap.foundations):
            _rebuild(f, view)
        _rebuild(self.stock, snap.stock)
        _rebuild(self.waste, snap.waste)
        self.move_count = snap.move_count

    def push_undo(self):
        self.history.append(self.snapshot())

    def can_undo(self) -> bool:
        return bool(self.history)

    def undo(self) -> bool:
        if not self.history:
            return False
        self.restore(self.history.pop())
        self.selection = None
        logger.debug("undo -> %d moves, %d snapshots left", self.move_count, len(self.history))
        self._notify("changed")
        return True

    # ---------- Dealing ----------
    def new_game(self, seed: Optional[int] = None):
        if seed is not None:
            self.rng.seed(seed)
        self.deal(shuffle_deck(make_deck(), self.rng))

    def deal(self, deck: Sequence[Card]):
        """Lay out ``deck`` in order: 1..7 cards per column, the rest to stock."""
        if len(deck) != DECK_SIZE or len({c.key() for c in deck}) != DECK_SIZE:
            raise ValueError("deal() needs one full 52-card deck")
        self.state = GameState.DEALING
        for p in self.all_piles():
            p.clear()

        it = iter(deck)
        for col, pile in enumerate(self.tableau):
            for r in range(col + 1):
                pile.add_card(next(it), r == col)
        for card in it:
            self.stock.add_card(card, False)

        self.move_count = 0
        self.history = []
        self.selection = None
        self._win_announced = False
        self._initial_snapshot = self.snapshot()
        self.state = GameState.PLAYING
        logger.info("new deal: %d in stock", len(self.stock))
        self._notify("changed")

    def restart(self) -> bool:
        """Go back to the opening layout of the current deal."""
        if self._initial_snapshot is None:
            return False
        self.restore(self._initial_snapshot)
        self.history = []
        self.selection = None
        self._win_announced = False
        self.state = GameState.PLAYING
        logger.info("restarted current deal")
        self._notify("changed")
        return True

    # ---------- Stock ----------
    def draw_from_stock(self) -> bool:
        """Turn one stock card onto the waste, or recycle the waste when the stock is out."""
        if self.stock.cards:
            self.push_undo()
            card = self.stock.top_card()
            self.stock.remove_card(card)
            card.flip()
            self.waste.add_card(card, True)
            self.selection = None
            self.move_count += 1
            logger.debug("drew %r", card)
            self._notify("changed")
            return True

        if self.waste.cards:
            self.push_undo()
            # Last drawn goes to the bottom, so the next pass repeats the same order
            while self.waste.cards:
                card = self.waste.top_card()
                self.waste.remove_card(card)
                card.flip()
                self.stock.add_card(card, False)
            self.selection = None
            logger.debug("recycled %d cards into stock", len(self.stock))
            self._notify("changed")
            return True

        return False

    # ---------- Moves ----------
    def begin_selection(self, pile: Pile, card: Card) -> Optional[SelectionHandle]:
        run = selectable_run(pile, card)
        if not run:
            self.selection = None
            return None
        self.selection = SelectionHandle(pile, tuple(run))
        return self.selection

    def cancel_selection(self):
        self.selection = None

    def resolve_drop(self, handle: Optional[SelectionHandle], target: Pile) -> MoveResult:
        if handle is None or handle is not self.selection:
            self.selection = None
            return MoveResult(False, "stale selection")
        return self.attempt_move(handle.cards, handle.source, target)

    def attempt_move(self, cards: Iterable[Card], source: Pile, target: Pile) -> MoveResult:
        """Move the run ``cards`` from ``source`` onto ``target`` if the rules allow it.

        The selection is cleared whatever the outcome. A rejected move
        changes nothing.
        """
        cards = list(cards)
        self.selection = None
        if not cards:
            return MoveResult(False, "empty selection")
        if source is target:
            return MoveResult(False, "same pile")
        n = len(cards)
        if n > len(source.cards) or any(a is not b for a, b in zip(source.cards[-n:], cards)):
            return MoveResult(False, "not on top of source")
        if not can_move(cards[0], source, target, n):
            return MoveResult(False, "illegal move")

        self.push_undo()
        source.remove_cards(cards)
        target.add_cards(cards)

        revealed = None
        if source.kind == TABLEAU:
            top = source.top_card()
            if top is not None and not top.face_up:
                top.flip()
                revealed = top

        self.move_count += 1
        logger.debug("moved %r %s -> %s", cards, source.name, target.name)
        won = self._after_move()
        return MoveResult(True, revealed=revealed, won=won)

    def _after_move(self) -> bool:
        self._notify("changed")
        if self._win_announced or not self.check_win():
            return False
        self._win_announced = True
        self.state = GameState.WON
        logger.info("game won in %d moves", self.move_count)
        self._notify("won")
        return True

    def check_win(self) -> bool:
        return all(len(f.cards) == FULL_FOUNDATION for f in self.foundations)

    # ---------- Foundation helpers ----------
    def foundation_for(self, card: Optional[Card], source: Pile) -> Optional[Pile]:
        """First foundation that would accept ``card`` from ``source``."""
        for f in self.foundations:
            if can_move(card, source, f):
                return f
        return None

    def move_to_foundation(self, pile: Pile) -> MoveResult:
        top = pile.top_card()
        if top is None or selectable_run(pile, top) != [top]:
            return MoveResult(False, "nothing to send")
        target = self.foundation_for(top, pile)
        if target is None:
            return MoveResult(False, "illegal move")
        return self.attempt_move([top], pile, target)

    def can_autofinish(self) -> bool:
        """Eligible when stock and waste are empty and all tableau cards are face-up."""
        if self.stock.cards or self.waste.cards:
            return False
        return all(c.face_up for p in self.tableau for c in p.cards)

    def autofinish_step(self) -> MoveResult:
        """Play one tableau card up to a foundation."""
        if not self.can_autofinish():
            return MoveResult(False, "cannot auto finish")
        for t in self.tableau:
            top = t.top_card()
            if top is not None and self.foundation_for(top, t) is not None:
                return self.move_to_foundation(t)
        return MoveResult(False, "no move")
