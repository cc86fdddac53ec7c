from app.models.program import Program  # noqa: F401
from app.models.schedule import Schedule  # noqa: F401
