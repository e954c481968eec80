from sqlalchemy.orm import Session

from ..models.stores import Store


class StoreRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_stores(self, active_only: bool = True) -> list[Store]:
        q = self.db.query(Store)
        if active_only:
            q = q.filter(Store.is_active.is_(True))
        return q.order_by(Store.code).all()

    def store_codes(self) -> list[str]:
        return [s.code for s in self.list_stores()]
