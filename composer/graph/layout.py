"""Grid placement of nodes on the canvas."""

from composer.models.service_node import Position

BASE_X = 500
BASE_Y = 200
SPACING_X = 320
SPACING_Y = 220
COLUMNS = 3  # max columns per row


def position_for(index: int) -> Position:
    """Position of the node at ``index``; same index, same position."""
    if index < 0:
        raise ValueError("index must be non-negative")
    column = index % COLUMNS
    row = index // COLUMNS
    return Position(x=BASE_X + column * SPACING_X, y=BASE_Y + row * SPACING_Y)
