from .todos import *
from .users import *
from .tokens import *
