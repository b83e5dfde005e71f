"""grrs - concurrent literal text search"""

from grrs.__version__ import __version__


__all__ = ['__version__']
