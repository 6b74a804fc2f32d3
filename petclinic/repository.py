# petclinic/repository.py
from typing import Any, Dict, List, Optional, Protocol

from bson import ObjectId
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from .db import get_db
from .errors import PersistenceError
from .schemas.owner import Owner, Pet, PetType
from .utils import to_id, to_bson_date


class OwnerRepository(Protocol):
    async def find_by_id(self, owner_id: str) -> Optional[Owner]: ...

    async def save(self, owner: Owner) -> None: ...

    async def find_pet_types(self) -> List[PetType]: ...


def _pet_to_doc(pet: Pet) -> Dict[str, Any]:
    return {
        "id": pet.id,
        "name": pet.name,
        "birth_date": to_bson_date(pet.birth_date),
        "type": pet.type.model_dump() if pet.type else None,
    }


def _owner_to_doc(owner: Owner) -> Dict[str, Any]:
    doc = owner.model_dump(exclude={"id", "pets"})
    doc["pets"] = [_pet_to_doc(p) for p in owner.pets]
    return doc


def _owner_from_doc(doc: Dict[str, Any]) -> Owner:
    d = to_id(doc)
    for pet in d.get("pets") or []:
        pet["owner_id"] = d["id"]
    return Owner.model_validate(d)


class MongoOwnerRepository:
    """Owners con sus mascotas embebidas; un documento por owner."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def find_by_id(self, owner_id: str) -> Optional[Owner]:
        if not ObjectId.is_valid(owner_id):
            return None
        doc = await self.db.owners.find_one({"_id": ObjectId(owner_id)})
        return _owner_from_doc(doc) if doc else None

    async def save(self, owner: Owner) -> None:
        # Las mascotas nuevas reciben id al guardar el agregado
        for pet in owner.pets:
            if pet.is_new:
                pet.id = str(ObjectId())
            pet.owner_id = owner.id
        try:
            res = await self.db.owners.replace_one({"_id": ObjectId(owner.id)}, _owner_to_doc(owner))
        except PyMongoError as exc:
            raise PersistenceError(f"Could not save owner {owner.id}: {exc}") from exc
        if res.matched_count == 0:
            raise PersistenceError(f"Owner {owner.id} no longer exists")

    async def find_pet_types(self) -> List[PetType]:
        docs = await self.db.pet_types.find().sort("name", 1).to_list(100)
        return [PetType.model_validate(to_id(d)) for d in docs]


async def get_owner_repository(db: AsyncIOMotorDatabase = Depends(get_db)) -> OwnerRepository:
    return MongoOwnerRepository(db)
