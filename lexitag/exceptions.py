# In lexitag/exceptions.py
"""
Exceptions shared across the tagging and entity-extraction pipeline.

- MissingAssetError : a serialized model file is absent or unreadable
- AssetDecodeError  : a serialized model file has the wrong type or shape
- TrainingDataError : training records cannot be turned into a corpus
"""


class LexitagError(Exception):
    """Base class for all lexitag errors."""
    pass


class MissingAssetError(LexitagError, IOError):
    """A required model file is missing or could not be read."""
    pass


class AssetDecodeError(LexitagError, ValueError):
    """A model file was read but its content has an unexpected shape."""
    pass


class TrainingDataError(LexitagError, ValueError):
    """Training records are malformed or empty."""
    pass
