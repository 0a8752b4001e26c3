"""Core domain of the cache admin layer.

Value objects, collaborator protocols, log events and exceptions shared
by the application layer.
"""

from .value_objects import *
from .protocols import *
from .events import *
from .exceptions import *
