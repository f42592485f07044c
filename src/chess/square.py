"""
A square on the board

(placed in its own module as the path finder, the job model and the persistence layer all need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import InvalidSquareError

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)

FILE_LABELS = "ABCDEFGH"
RANK_LABELS = "12345678"


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_label(cls, label: str) -> Square:
        """Label notation: 'A1' - 'H8' get converted to (1,1) - (8,8). No validation, see parse_square()."""
        file = ord(label[0].upper()) - ord("A") + 1
        rank = int(label[1])
        return cls(file, rank)

    def to_label(self) -> str:
        return f"{chr(self.file + ord('A') - 1)}{self.rank}"

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )

    def offset(self, d_file: int, d_rank: int) -> Square:
        """Square shifted by a vector. May be off the board."""
        return Square(self.file + d_file, self.rank + d_rank)

    def __str__(self) -> str:
        return self.to_label()


def parse_square(text: str) -> Square:
    """
    Validate and convert a label like 'A1' into a Square.
    ---
    Exactly two characters: a file in A-H and a rank in 1-8.
    Lower case files are accepted and normalized ('a1' == 'A1'). Whitespace is not stripped.
    """
    if not isinstance(text, str) or len(text) != 2:
        raise InvalidSquareError(f"Cannot interpret {text!r} as a square label.")

    file_char, rank_char = text[0].upper(), text[1]
    if file_char not in FILE_LABELS[: BOARD_DIMENSIONS[0]]:
        raise InvalidSquareError(f"Invalid file in {text!r}. Expected A-H.")
    if rank_char not in RANK_LABELS[: BOARD_DIMENSIONS[1]]:
        raise InvalidSquareError(f"Invalid rank in {text!r}. Expected 1-8.")

    return Square.from_label(file_char + rank_char)


# Every square on the board, ordered A1, A2, ..., H8
ALL_SQUARES: tuple[Square, ...] = tuple(
    Square(file, rank)
    for file in range(1, BOARD_DIMENSIONS[0] + 1)
    for rank in range(1, BOARD_DIMENSIONS[1] + 1)
)
