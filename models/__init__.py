# This file makes the models directory a Python package
from .scripture import Verse, ScriptureReference

__all__ = [
    'Verse',
    'ScriptureReference',
]
