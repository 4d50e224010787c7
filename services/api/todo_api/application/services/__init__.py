from .auth import *
from .todos import *
from .users import *
