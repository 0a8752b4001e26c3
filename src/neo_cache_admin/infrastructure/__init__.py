"""Infrastructure layer of the cache admin.

Redis implementations of the store collaborator protocols and the JSON
value serializer.
"""

from .clients import *
from .serializers import *
