# petclinic/routers/dev.py
# Endpoint de desarrollo para crear datos de prueba
from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId
from datetime import datetime
from ..db import get_db

router = APIRouter()

PET_TYPES = ["bird", "cat", "dog", "hamster", "lizard", "snake"]

@router.post("/seed-data")
async def seed_data(db: AsyncIOMotorDatabase = Depends(get_db)):
    """
    Crea datos de prueba: tipos de mascota y algunos owners con sus mascotas.
    Solo para desarrollo.
    """
    types: dict[str, dict] = {}
    for name in PET_TYPES:
        existing = await db.pet_types.find_one({"name": name})
        if existing:
            types[name] = {"id": str(existing["_id"]), "name": name}
            continue
        res = await db.pet_types.insert_one({"name": name})
        types[name] = {"id": str(res.inserted_id), "name": name}

    owners_data = [
        {
            "first_name": "George",
            "last_name": "Franklin",
            "address": "110 W. Liberty St.",
            "city": "Madison",
            "telephone": "6085551023",
            "pets": [("Leo", datetime(2010, 9, 7), "cat")],
        },
        {
            "first_name": "Betty",
            "last_name": "Davis",
            "address": "638 Cardinal Ave.",
            "city": "Sun Prairie",
            "telephone": "6085551749",
            "pets": [("Basil", datetime(2012, 8, 6), "hamster")],
        },
        {
            "first_name": "Eduardo",
            "last_name": "Rodriquez",
            "address": "2693 Commerce St.",
            "city": "McFarland",
            "telephone": "6085558763",
            "pets": [("Rosy", datetime(2011, 4, 17), "dog"), ("Jewel", datetime(2010, 3, 7), "dog")],
        },
    ]

    created_owners = []
    for owner_data in owners_data:
        existing = await db.owners.find_one({
            "first_name": owner_data["first_name"],
            "last_name": owner_data["last_name"],
        })
        if existing:
            created_owners.append(str(existing["_id"]))
            continue

        doc = dict(owner_data)
        doc["pets"] = [
            {"id": str(ObjectId()), "name": name, "birth_date": born, "type": types[kind]}
            for name, born, kind in owner_data["pets"]
        ]
        res = await db.owners.insert_one(doc)
        created_owners.append(str(res.inserted_id))

    return {
        "message": "Datos de prueba creados",
        "pet_types": len(types),
        "owners_created": len(created_owners),
        "owner_ids": created_owners,
    }
