"""
Constants for the tic-tac-toe room server.
"""

# Board dimensions
BOARD_SIZE = 3
BOARD_CELLS = BOARD_SIZE * BOARD_SIZE

# Players
X = "X"
O = "O"
SYMBOLS = (X, O)

# Winning lines, checked in this order:
# rows top-to-bottom, columns left-to-right, then the two diagonals.
WIN_PATTERNS = [
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
]

# Room codes avoid 0/O and 1/I
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 4

# Lifecycle timings (seconds)
ROOM_TTL_SEC = 10 * 60
SWEEP_INTERVAL_SEC = 60
DISCONNECT_GRACE_SEC = 60

ROOM_CLOSED_REASON = "Opponent did not reconnect"

# Outbound messages buffered per connection before it is dropped
OUTBOUND_QUEUE_SIZE = 100
# WebSocket close code for a peer that stopped reading (policy violation)
STALLED_CLOSE_CODE = 1008
