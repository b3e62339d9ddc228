"""
Visores de diferencias externos
"""
from .diff_viewers import (
    DefaultDiffViewer,
    DiffViewer,
    GitDiffViewer,
    MeldDiffViewer,
    VSCodeDiffViewer,
    ZedDiffViewer,
)

__all__ = [
    'DiffViewer',
    'GitDiffViewer',
    'ZedDiffViewer',
    'VSCodeDiffViewer',
    'MeldDiffViewer',
    'DefaultDiffViewer'
]
