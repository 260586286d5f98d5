# cards.py - cards, piles and the deck factory (no pygame here)
from __future__ import annotations

import random
from typing import Iterable, Iterator, List, Optional, Tuple

SUITS = ("hearts", "diamonds", "clubs", "spades")
SUIT_SYMBOLS = {"hearts": "♥", "diamonds": "♦", "clubs": "♣", "spades": "♠"}
RED_SUITS = ("hearts", "diamonds")

RANK_TO_TEXT = {1: "A", 11: "J", 12: "Q", 13: "K"}
for _r in range(2, 11):
    RANK_TO_TEXT[_r] = str(_r)

ACE = 1
KING = 13

# Pile kinds
TABLEAU = "tableau"
FOUNDATION = "foundation"
STOCK = "stock"
WASTE = "waste"
PILE_KINDS = (TABLEAU, FOUNDATION, STOCK, WASTE)

CardKey = Tuple[str, int]


def is_red(suit: str) -> bool:
    return suit in RED_SUITS


# ---------- Cards & Piles ----------
class Card:
    __slots__ = ("suit", "rank", "face_up")

    def __init__(self, suit: str, rank: int, face_up: bool = False):
        if suit not in SUITS:
            raise ValueError(f"Unknown suit: {suit!r}")
        if not 1 <= rank <= 13:
            raise ValueError(f"Rank out of range: {rank!r}")
        self.suit = suit
        self.rank = rank
        self.face_up = face_up

    def color(self) -> str:
        return "red" if is_red(self.suit) else "black"

    @property
    def symbol(self) -> str:
        return SUIT_SYMBOLS[self.suit]

    @property
    def rank_label(self) -> str:
        return RANK_TO_TEXT[self.rank]

    def key(self) -> CardKey:
        return (self.suit, self.rank)

    def flip(self):
        self.face_up = not self.face_up

    def __repr__(self):
        return f"{self.rank_label}{self.symbol}{'↑' if self.face_up else '↓'}"


class Pile:
    """Ordered stack of cards; index 0 is the bottom, the last card is the top.

    Piles are plain containers. They never check whether a card belongs on
    them; that is :mod:`klondike.rules`' job.
    """

    def __init__(self, kind: str, index: int = 0):
        if kind not in PILE_KINDS:
            raise ValueError(f"Unknown pile kind: {kind!r}")
        self.kind = kind
        self.index = index
        self.cards: List[Card] = []

    @property
    def name(self) -> str:
        if self.kind in (TABLEAU, FOUNDATION):
            return f"{self.kind}-{self.index}"
        return self.kind

    def add_card(self, card: Card, face_up: bool = True):
        card.face_up = face_up
        self.cards.append(card)

    def remove_card(self, card: Card):
        for i, c in enumerate(self.cards):
            if c is card:
                del self.cards[i]
                return

    def add_cards(self, cards: Iterable[Card]):
        for c in list(cards):
            self.add_card(c, True)

    def remove_cards(self, cards: Iterable[Card]):
        for c in list(cards):
            self.remove_card(c)

    def top_card(self) -> Optional[Card]:
        return self.cards[-1] if self.cards else None

    def is_empty(self) -> bool:
        return not self.cards

    def clear(self):
        self.cards = []

    def __contains__(self, card) -> bool:
        return any(c is card for c in self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __repr__(self):
        return f"Pile({self.name}, {self.cards!r})"


# ---------- Deck ----------
def make_deck() -> List[Card]:
    """Return the 52 cards face down, suits outer and ranks inner."""
    return [Card(suit, rank, False) for suit in SUITS for rank in range(1, 14)]


def shuffle_deck(deck: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    # random.shuffle is Fisher-Yates: every ordering is equally likely
    (rng or random).shuffle(deck)
    return deck
