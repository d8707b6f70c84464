"""
Root entry point – delegates to the chess_scanner package.

Usage:
    python chess_scanner.py scan    --image board.jpg --render board.png
    python chess_scanner.py render  --fen "8/8/8/4k3/8/8/8/4K3 w - - 0 1" --output board.png
    python chess_scanner.py export  --fen "8/8/8/4k3/8/8/8/4K3 w - - 0 1"
    python chess_scanner.py edit
"""

from chess_scanner.main import main

if __name__ == "__main__":
    main()
