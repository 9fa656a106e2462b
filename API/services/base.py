"""
Base service class with restaurant scoping.
All restaurant-scoped services should inherit from RestaurantServiceBase.
"""

from sqlalchemy.orm import Session, Query


class RestaurantServiceBase:
    """
    Base service class that scopes every query to one restaurant.
    
    Usage:
        class MenuService(RestaurantServiceBase):
            def list_items(self):
                return self._q(MenuItem).filter(MenuItem.is_available == True).all()
    
    self._q(Model) is equivalent to:
        self.db.query(Model).filter(Model.restaurant_id == self.restaurant_id)
    """
    
    def __init__(self, db: Session, restaurant_id: int):
        self.db = db
        self.restaurant_id = restaurant_id
    
    def _q(self, model) -> Query:
        """
        Create a restaurant-filtered query.
        
        Adds WHERE restaurant_id = :restaurant_id for models that have
        a restaurant_id column.
        """
        query = self.db.query(model)
        if hasattr(model, 'restaurant_id'):
            query = query.filter(model.restaurant_id == self.restaurant_id)
        return query
