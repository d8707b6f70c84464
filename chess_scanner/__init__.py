"""
Chess Scanner
=============

Turns a photo or screenshot of a chessboard into an editable position.

Architecture:
    1. Image preparation – decode, downscale to 1024 px, JPEG-compress
    2. Vision analysis   – Gemini returns the position as a FEN string
    3. Board codec       – FEN ⇄ 64-square board (a8 = 0 … h1 = 63)
    4. Board editor      – move / erase / place edits, rotate, reset, clear
    5. Export            – full FEN for the clipboard, Lichess analysis URL
"""

__version__ = "1.0.0"
