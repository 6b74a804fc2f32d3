# petclinic/utils.py
from typing import Any, Dict, Optional
from bson import ObjectId
from datetime import date, datetime, time


def to_id(doc: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Convierte _id -> id (str) y todos los ObjectIds a strings.
    Los datetime se convierten a date (Mongo no guarda fechas sin hora).
    Si doc es None, devuelve {}.
    """
    if doc is None:
        return {}
    d = dict(doc)

    if "_id" in d:
        d["id"] = str(d.pop("_id"))

    for key, value in d.items():
        if isinstance(value, ObjectId):
            d[key] = str(value)
        elif isinstance(value, datetime):
            d[key] = value.date()
        elif isinstance(value, dict):
            d[key] = to_id(value)
        elif isinstance(value, list):
            d[key] = [
                str(item) if isinstance(item, ObjectId)
                else item.date() if isinstance(item, datetime)
                else to_id(item) if isinstance(item, dict)
                else item
                for item in value
            ]

    return d

def to_bson_date(value: Optional[date]) -> Optional[datetime]:
    """BSON solo tiene datetime: guardamos la fecha a medianoche."""
    if value is None:
        return None
    return datetime.combine(value, time.min)
