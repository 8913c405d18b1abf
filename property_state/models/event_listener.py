from sqlalchemy import event

from .models import User


@event.listens_for(User, "before_insert")
@event.listens_for(User, "before_update")
def normalize_user(mapper, connection, target: User):
    target.normalize()
