from __future__ import annotations

# ID3v2 frame identifiers for the chapter frames and their title sub-frame.
# Keep these centralized to reduce magic strings and accidental divergence.

CHAP = "CHAP"
CTOC = "CTOC"
TIT2 = "TIT2"
