from .roles import *
from .todos import *
from .users import *
