from datetime import date
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field


class PetType(BaseModel):
    """Dato de referencia (dog, cat, ...). Inmutable y compartido."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class Pet(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    birth_date: Optional[date] = None
    type: Optional[PetType] = None
    owner_id: Optional[str] = None   # referencia al owner, no propiedad

    @property
    def is_new(self) -> bool:
        return self.id is None


class Owner(BaseModel):
    id: str
    first_name: str
    last_name: str
    address: Optional[str] = None
    city: Optional[str] = None
    telephone: Optional[str] = None
    pets: List[Pet] = Field(default_factory=list)

    def add_pet(self, pet: Pet) -> None:
        if pet.is_new:
            pet.owner_id = self.id
            self.pets.append(pet)

    def get_pet(self, pet_id: str) -> Optional[Pet]:
        for pet in self.pets:
            if not pet.is_new and pet.id == pet_id:
                return pet
        return None

    def get_pet_by_name(self, name: str, ignore_new: bool = False) -> Optional[Pet]:
        """
        Busca una mascota por nombre sin distinguir mayúsculas.
        Con ignore_new=True se saltan las mascotas aún no guardadas.
        """
        wanted = name.lower()
        for pet in self.pets:
            if ignore_new and pet.is_new:
                continue
            if pet.name is not None and pet.name.lower() == wanted:
                return pet
        return None
