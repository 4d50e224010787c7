from .base import VersionedBaseModel
from .users import User
from .todos import Todo
