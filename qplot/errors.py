from __future__ import annotations


class QplotError(RuntimeError):
    """Base class for qplot failures."""


class ChannelError(QplotError):
    pass


class ChannelSpawnError(ChannelError):
    pass


class StyleLookupError(QplotError, LookupError):
    pass


class PlotDataError(QplotError, ValueError):
    pass
