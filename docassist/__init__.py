"""DocAssist: document library with an AI assistant and resume interview questions."""

__version__ = "1.0.0"
