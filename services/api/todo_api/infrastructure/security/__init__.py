from .passwords import *
from .tokens import *
from .auth_strategies import *
