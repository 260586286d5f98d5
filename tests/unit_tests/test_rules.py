import pytest

from klondike.cards import FOUNDATION, STOCK, TABLEAU, WASTE, Card, Pile
from klondike.rules import (
    can_move,
    can_move_to_foundation,
    can_stack_tableau,
    selectable_run,
)


def pile_of(kind, *cards, index=0):
    pile = Pile(kind, index)
    for suit, rank, face_up in cards:
        pile.add_card(Card(suit, rank), face_up)
    return pile


@pytest.mark.parametrize(
    "card, foundation, expected",
    [
        (("hearts", 1), [], True),
        (("hearts", 2), [], False),
        (("hearts", 2), [("hearts", 1, True)], True),
        (("diamonds", 2), [("hearts", 1, True)], False),
        (("hearts", 3), [("hearts", 1, True)], False),
        (("spades", 13), [("spades", r, True) for r in range(1, 13)], True),
    ],
)
def test_foundation_moves(card, foundation, expected):
    target = pile_of(FOUNDATION, *foundation)
    source = pile_of(WASTE, (card[0], card[1], True))
    assert can_move(source.top_card(), source, target) is expected
    assert can_move_to_foundation(source.top_card(), target) is expected


def test_foundation_only_takes_single_cards():
    target = pile_of(FOUNDATION)
    source = pile_of(TABLEAU, ("hearts", 1, True), ("clubs", 13, True))
    ace = source.cards[0]
    assert can_move(ace, source, target, count=1)
    assert not can_move(ace, source, target, count=2)


@pytest.mark.parametrize(
    "card, tableau, expected",
    [
        (("spades", 13), [], True),
        (("hearts", 13), [], True),
        (("spades", 12), [], False),
        (("spades", 12), [("hearts", 13, True)], True),
        (("clubs", 12), [("diamonds", 13, True)], True),
        (("diamonds", 12), [("hearts", 13, True)], False),
        (("spades", 11), [("hearts", 13, True)], False),
        (("spades", 13), [("hearts", 12, True)], False),
    ],
)
def test_tableau_moves(card, tableau, expected):
    target = pile_of(TABLEAU, *tableau, index=1)
    source = pile_of(WASTE, (card[0], card[1], True))
    assert can_move(source.top_card(), source, target, count=3) is expected


def test_same_pile_is_illegal():
    pile = pile_of(TABLEAU, ("hearts", 13, True))
    assert not can_move(pile.top_card(), pile, pile)


@pytest.mark.parametrize("kind", [STOCK, WASTE])
def test_other_targets_are_illegal(kind):
    source = pile_of(TABLEAU, ("hearts", 1, True))
    target = pile_of(kind)
    assert not can_move(source.top_card(), source, target)


def test_missing_inputs_are_illegal():
    pile = pile_of(TABLEAU)
    assert not can_move(None, pile, pile_of(FOUNDATION))
    assert not can_move(Card("hearts", 1, True), None, pile)
    assert not can_move(Card("hearts", 1, True), pile, None)
    assert not can_stack_tableau(None, Card("hearts", 2))


def test_selectable_run_from_tableau():
    pile = pile_of(
        TABLEAU,
        ("clubs", 4, False),
        ("hearts", 10, True),
        ("spades", 9, True),
        ("diamonds", 8, True),
    )
    down, ten, nine, eight = pile.cards
    assert selectable_run(pile, down) == []
    assert selectable_run(pile, ten) == [ten, nine, eight]
    assert selectable_run(pile, eight) == [eight]
    assert selectable_run(pile, Card("hearts", 10, True)) == []


def test_selectable_run_single_top_elsewhere():
    waste = pile_of(WASTE, ("hearts", 2, True), ("clubs", 5, True))
    under, top = waste.cards
    assert selectable_run(waste, top) == [top]
    assert selectable_run(waste, under) == []

    foundation = pile_of(FOUNDATION, ("hearts", 1, True), ("hearts", 2, True))
    assert selectable_run(foundation, foundation.top_card()) == [foundation.top_card()]

    stock = pile_of(STOCK, ("spades", 3, True))
    assert selectable_run(stock, stock.top_card()) == []
