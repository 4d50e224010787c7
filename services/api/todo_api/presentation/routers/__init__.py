from .auth import router as AuthRouter
from .users import router as UserRouter
from .todos import router as TodoRouter
from .health import router as HealthRouter
