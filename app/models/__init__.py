# ZoneMinder Review — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.storage import Storage    # noqa
from app.models.monitor import Monitor    # noqa
from app.models.event import Event        # noqa
