import logging
from typing import Any, Dict, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.constants import DEFAULT_WORLD_CLOCK_CITIES
from app.models.timezones import WorldClockCity
from app.schemas.timezone import WorldClockCityCreate, WorldClockCityOrder, WorldClockCityUpdate
from app.utils.errors import ConflictError, NotFoundError, ValidationFailed
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)


def city_to_dict(city: WorldClockCity) -> Dict[str, Any]:
    """Client shape: `name` is the custom label when one is set."""
    return {
        "id": city.city_id,
        "name": city.custom_label or city.city_name,
        "original_name": city.city_name,
        "custom_label": city.custom_label,
        "country": city.country,
        "country_code": city.country_code,
        "timezone": city.timezone,
        "coordinates": {"lat": city.latitude, "lng": city.longitude},
        "region": city.region,
        "population": city.population,
        "is_popular": city.is_popular,
        "display_order": city.display_order,
    }


class WorldClockService:
    @staticmethod
    def list_cities(db: Session, user_id: str) -> List[WorldClockCity]:
        return (
            db.query(WorldClockCity)
            .filter(WorldClockCity.user_id == user_id)
            .order_by(WorldClockCity.display_order.asc(), WorldClockCity.created_at.asc())
            .all()
        )

    @staticmethod
    def _get_owned(db: Session, user_id: str, city_id: str) -> WorldClockCity:
        city = (
            db.query(WorldClockCity)
            .filter(WorldClockCity.user_id == user_id, WorldClockCity.city_id == city_id)
            .first()
        )
        if not city:
            raise NotFoundError("City not found")
        return city

    @staticmethod
    def add_city(db: Session, user_id: str, data: WorldClockCityCreate) -> WorldClockCity:
        exists = (
            db.query(WorldClockCity.id)
            .filter(WorldClockCity.user_id == user_id, WorldClockCity.city_id == data.city_id)
            .first()
        )
        if exists:
            raise ConflictError("This city is already added to your World Clock")

        display_order = db.query(WorldClockCity).filter(WorldClockCity.user_id == user_id).count()
        city = WorldClockCity(user_id=user_id, display_order=display_order, **data.model_dump())
        db.add(city)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("This city is already added to your World Clock")
        db.refresh(city)
        return city

    @staticmethod
    def update_city(db: Session, user_id: str, city_id: str, data: WorldClockCityUpdate) -> WorldClockCity:
        changes = data.model_dump(exclude_unset=True)
        if "custom_label" not in changes and changes.get("display_order") is None:
            raise ValidationFailed("custom_label or display_order is required")

        city = WorldClockService._get_owned(db, user_id, city_id)
        if "custom_label" in changes:
            # Empty label falls back to the city name
            city.custom_label = changes["custom_label"] or None
        if changes.get("display_order") is not None:
            city.display_order = changes["display_order"]
        city.updated_at = utcnow()
        db.commit()
        db.refresh(city)
        return city

    @staticmethod
    def remove_city(db: Session, user_id: str, city_id: str) -> None:
        city = WorldClockService._get_owned(db, user_id, city_id)
        db.delete(city)
        db.commit()

    @staticmethod
    def clear_cities(db: Session, user_id: str) -> int:
        count = db.query(WorldClockCity).filter(WorldClockCity.user_id == user_id).delete(synchronize_session=False)
        db.commit()
        return count

    @staticmethod
    def reorder(db: Session, user_id: str, orders: List[WorldClockCityOrder]) -> List[WorldClockCity]:
        for order in orders:
            (
                db.query(WorldClockCity)
                .filter(WorldClockCity.user_id == user_id, WorldClockCity.city_id == order.city_id)
                .update({WorldClockCity.display_order: order.display_order}, synchronize_session=False)
            )
        db.commit()
        return WorldClockService.list_cities(db, user_id)

    @staticmethod
    def initialize_defaults(db: Session, user_id: str) -> List[WorldClockCity]:
        existing = {
            city_id for (city_id,) in db.query(WorldClockCity.city_id).filter(WorldClockCity.user_id == user_id).all()
        }
        for default in DEFAULT_WORLD_CLOCK_CITIES:
            if default["city_id"] in existing:
                continue
            db.add(WorldClockCity(user_id=user_id, **default))
        db.commit()
        return WorldClockService.list_cities(db, user_id)

    @staticmethod
    def stats(db: Session, user_id: str) -> Dict[str, Any]:
        rows = (
            db.query(WorldClockCity.timezone, WorldClockCity.created_at)
            .filter(WorldClockCity.user_id == user_id)
            .order_by(WorldClockCity.created_at.asc())
            .all()
        )
        if not rows:
            return {"total": 0, "oldest": None, "newest": None, "timezones": []}
        timezones = list(dict.fromkeys(tz for tz, _ in rows))
        return {"total": len(rows), "oldest": rows[0][1], "newest": rows[-1][1], "timezones": timezones}
