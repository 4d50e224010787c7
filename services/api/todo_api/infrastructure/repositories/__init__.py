from .todos import *
from .users import *
