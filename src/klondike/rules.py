"""Klondike move legality.

Everything here is a pure predicate over cards and piles: nothing is
mutated and nothing raises. An input that makes no sense (no card, no
pile) is simply an illegal move.
"""

from __future__ import annotations

from typing import List, Optional

from klondike.cards import ACE, FOUNDATION, KING, TABLEAU, WASTE, Card, Pile


def can_stack_tableau(upper: Optional[Card], lower: Optional[Card]) -> bool:
    """True when ``upper`` may sit on ``lower`` in a tableau column."""
    if not lower or not upper:
        return False
    return upper.color() != lower.color() and upper.rank == lower.rank - 1


def can_move_to_empty_tableau(card: Card) -> bool:
    return card.rank == KING


def can_move_to_foundation(card: Card, foundation: Pile) -> bool:
    top = foundation.top_card()
    if top is None:
        return card.rank == ACE
    return card.suit == top.suit and card.rank == top.rank + 1


def can_move(card: Optional[Card], source: Optional[Pile], target: Optional[Pile], count: int = 1) -> bool:
    """Return whether a run led by ``card`` may move from ``source`` to ``target``.

    ``count`` is the length of the run being moved; foundations only ever
    accept a single card.
    """
    if card is None or source is None or target is None:
        return False
    if source is target:
        return False

    if target.kind == FOUNDATION:
        if count > 1:
            return False
        return can_move_to_foundation(card, target)

    if target.kind == TABLEAU:
        top = target.top_card()
        if top is None:
            return can_move_to_empty_tableau(card)
        return can_stack_tableau(card, top)

    return False


def selectable_run(pile: Optional[Pile], card: Optional[Card]) -> List[Card]:
    """Cards that would be picked up by grabbing ``card`` on ``pile``.

    From a tableau column that is the face-up run from ``card`` to the top.
    From the waste or a foundation only the face-up top card can be taken.
    The stock is never dragged. An empty list means nothing is grabbable.
    """
    if pile is None or card is None or not card.face_up:
        return []

    if pile.kind == TABLEAU:
        for i, c in enumerate(pile.cards):
            if c is card:
                run = pile.cards[i:]
                if all(r.face_up for r in run):
                    return list(run)
                return []
        return []

    if pile.kind in (WASTE, FOUNDATION):
        return [card] if pile.top_card() is card else []

    return []
