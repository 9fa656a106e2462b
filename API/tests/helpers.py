from database.models import Restaurant


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def reload(db_session, restaurant_id: int) -> Restaurant:
    """Fresh copy of the restaurant row (the request may have changed it)."""
    db_session.expire_all()
    return db_session.query(Restaurant).filter(Restaurant.id == restaurant_id).one()
