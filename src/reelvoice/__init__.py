"""reelvoice — narration timing and audio assembly for short videos."""

__version__ = "0.1.0"
