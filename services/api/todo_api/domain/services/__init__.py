from .passwords import *
from .tokens import *
from .todos import *
