from datetime import date
from typing import Optional, List, Literal

from pydantic import BaseModel, ConfigDict

from .owner import Owner, Pet, PetType

FORM_VIEW = "pets/createOrUpdatePetForm"

class PetForm(BaseModel):
    """Campos que el cliente puede enviar. Cualquier otro campo (id, owner_id...) se descarta."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    birth_date: Optional[date] = None
    type_id: Optional[str] = None

class FieldError(BaseModel):
    field: str
    code: str
    message: Optional[str] = None

class PetFormView(BaseModel):
    view: str = FORM_VIEW
    owner: Owner
    pet: Pet
    types: List[PetType] = []
    errors: List[FieldError] = []

class PetFormResult(BaseModel):
    state: Literal["persisted", "rejected"]
    redirect: Optional[str] = None
    message: Optional[str] = None
    pet: Optional[Pet] = None
    form: Optional[PetForm] = None       # valores originales para re-mostrar el formulario
    errors: List[FieldError] = []

    @property
    def ok(self) -> bool:
        return self.state == "persisted"
