"""Extract mentions, emoticons and URL titles from short chat messages."""

__version__ = "1.0.0"
