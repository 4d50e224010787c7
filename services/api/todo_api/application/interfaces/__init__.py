from .auth_strategies import *
