"""Application layer for cache administration."""

from .queries import *
from .commands import *
from .services import *
