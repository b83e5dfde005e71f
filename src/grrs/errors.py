"""Exceptions raised by the search pipeline"""


class SearchRootError(Exception):
    """The search root cannot be used; the run aborts before any job is dispatched."""


class RootNotFoundError(SearchRootError, FileNotFoundError):
    pass


class RootNotReadableError(SearchRootError):
    pass


class PoolStateError(RuntimeError):
    """Worker pool operation called in the wrong lifecycle state."""


class ChannelClosedError(RuntimeError):
    pass
