from .common import *
from .token import *
from .users import *
from .todos import *
