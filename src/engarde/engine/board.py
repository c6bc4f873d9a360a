from __future__ import annotations

from dataclasses import dataclass, field

from .types import Direction, opponent

LEFT_EDGE = 1
RIGHT_EDGE = 23


@dataclass
class Board:
    """Positions, scores, whose turn it is and the remaining draw pile.

    Player 0 starts on the left edge and faces right; player 1 starts on the
    right edge and faces left. The two never share or cross a cell.
    """

    positions: list[int]
    scores: list[int]
    deck: list[int]
    current_player: int = 0
    cells: int = RIGHT_EDGE

    @staticmethod
    def starting(deck: list[int], scores: list[int], current_player: int, cells: int = RIGHT_EDGE) -> "Board":
        return Board(
            positions=[LEFT_EDGE, cells],
            scores=list(scores),
            deck=deck,
            current_player=current_player,
            cells=cells,
        )

    def pos(self, player: int) -> int:
        return self.positions[player]

    def score(self, player: int) -> int:
        return self.scores[player]

    def distance(self) -> int:
        return self.positions[1] - self.positions[0]

    def deck_size(self) -> int:
        return len(self.deck)

    def edge_distance(self, player: int) -> int:
        """Cells between the player and the far wall it is facing."""
        if player == 0:
            return self.cells - self.positions[0]
        return self.positions[1] - LEFT_EDGE

    def move(self, player: int, card: int, direction: Direction) -> None:
        # player 0 advances rightwards, player 1 leftwards
        step = card if (player == 0) == (direction == "forward") else -card
        self.positions[player] += step


@dataclass
class Player:
    id: int
    hand: list[int] = field(default_factory=list)

    def count(self, card: int) -> int:
        return self.hand.count(card)

    def holds(self, card: int) -> bool:
        return card in self.hand

    def remove_card(self, card: int) -> None:
        # last occurrence first; the hand is a multiset so order is immaterial
        idx = len(self.hand) - 1 - self.hand[::-1].index(card)
        self.hand.pop(idx)

    def add_card(self, card: int) -> None:
        self.hand.append(card)

    def can_move(self, board: Board, card: int, direction: Direction) -> bool:
        me = board.pos(self.id)
        other = board.pos(opponent(self.id))
        if self.id == 0:
            if direction == "back":
                return me - card >= LEFT_EDGE
            return me + card < other
        if direction == "back":
            return me + card <= board.cells
        return me - card > other

    def can_attack(self, board: Board, card: int) -> bool:
        return card == board.distance()

    def can_act(self, board: Board) -> bool:
        for card in set(self.hand):
            if self.can_attack(board, card):
                return True
            if self.can_move(board, card, "forward") or self.can_move(board, card, "back"):
                return True
        return False
