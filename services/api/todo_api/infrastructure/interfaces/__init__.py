from .connections import *
from .uow import *
from .tracer import *
