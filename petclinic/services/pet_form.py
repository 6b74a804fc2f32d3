"""
Manejador del formulario de mascotas (alta y edición).

Flujo por envío: Validating -> Rejected (errores, sin guardar)
                 Validating -> Persisted (un único save del owner)

Aquí no se hace logging: eso lo añade el router, que es el borde HTTP.
Todos los errores de campo se acumulan antes de decidir; nunca se corta
en la primera regla que falla.
"""
from datetime import date
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..errors import NotFoundError
from ..repository import OwnerRepository
from ..schemas.owner import Owner, Pet, PetType
from ..schemas.pet import FieldError, PetForm, PetFormResult, PetFormView

REQUIRED = "required"
DUPLICATE = "duplicate"
TYPE_MISMATCH = "typeMismatch"

CREATED_MESSAGE = "New Pet has been Added"
UPDATED_MESSAGE = "Pet details has been edited"

FieldValidator = Callable[[Pet], List[FieldError]]


def require_fields(pet: Pet) -> List[FieldError]:
    """Reglas de campo obligatorio: nombre siempre, tipo solo en mascotas nuevas."""
    errors: List[FieldError] = []
    if not (pet.name or "").strip():
        errors.append(FieldError(field="name", code=REQUIRED, message="is required"))
    if pet.is_new and pet.type is None:
        errors.append(FieldError(field="type", code=REQUIRED, message="is required"))
    return errors


class PetFormOptions(BaseModel):
    """Configuración explícita por llamada (fecha de referencia y validadores de campo)."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    today: Callable[[], date] = date.today
    validators: List[FieldValidator] = Field(default_factory=lambda: [require_fields])


# -------------------- helpers --------------------

async def _load_owner(repo: OwnerRepository, owner_id: str) -> Owner:
    owner = await repo.find_by_id(owner_id)
    if owner is None:
        raise NotFoundError("Owner", owner_id)
    return owner

def _load_pet(owner: Owner, pet_id: str) -> Pet:
    pet = owner.get_pet(pet_id)
    if pet is None:
        raise NotFoundError("Pet", pet_id)
    return pet

def _bind_type(form: PetForm, types: Dict[str, PetType], current: Optional[PetType]):
    """Resuelve type_id contra los tipos conocidos. Sin type_id se conserva el actual."""
    if form.type_id is None:
        return current, []
    pet_type = types.get(form.type_id)
    if pet_type is None:
        return None, [FieldError(field="type", code=TYPE_MISMATCH, message="type not found")]
    return pet_type, []

def _has_text(value: Optional[str]) -> bool:
    return bool(value and value.strip())

def _is_duplicate_for_edit(owner: Owner, name: str, pet_id: str) -> bool:
    wanted = name.lower()
    return any(
        p.name is not None and p.name.lower() == wanted and p.id != pet_id
        for p in owner.pets
    )

def _check_birth_date(pet: Pet, today: date) -> List[FieldError]:
    if pet.birth_date is not None and pet.birth_date > today:
        return [FieldError(field="birth_date", code=TYPE_MISMATCH, message="birth date is in the future")]
    return []

def _run_validators(pet: Pet, options: PetFormOptions) -> List[FieldError]:
    errors: List[FieldError] = []
    for validator in options.validators:
        errors.extend(validator(pet))
    return errors

def _rejected(form: PetForm, pet: Pet, errors: List[FieldError]) -> PetFormResult:
    return PetFormResult(state="rejected", form=form, pet=pet, errors=errors)


# -------------------- operaciones --------------------

async def list_pet_types(repo: OwnerRepository, owner_id: str) -> List[PetType]:
    """Tipos disponibles para el formulario; el owner tiene que existir."""
    await _load_owner(repo, owner_id)
    return await repo.find_pet_types()


async def prepare_create(repo: OwnerRepository, owner_id: str) -> PetFormView:
    owner = await _load_owner(repo, owner_id)
    pet = Pet(owner_id=owner.id)
    return PetFormView(owner=owner, pet=pet, types=await repo.find_pet_types())


async def submit_create(
    repo: OwnerRepository,
    owner_id: str,
    form: PetForm,
    options: Optional[PetFormOptions] = None,
) -> PetFormResult:
    options = options or PetFormOptions()
    owner = await _load_owner(repo, owner_id)
    types = {t.id: t for t in await repo.find_pet_types()}

    pet_type, errors = _bind_type(form, types, None)
    pet = Pet(name=form.name, birth_date=form.birth_date, type=pet_type, owner_id=owner.id)

    errors += _run_validators(pet, options)
    if _has_text(pet.name) and owner.get_pet_by_name(pet.name, ignore_new=True) is not None:
        errors.append(FieldError(field="name", code=DUPLICATE, message="already exists"))
    errors += _check_birth_date(pet, options.today())

    if errors:
        return _rejected(form, pet, errors)

    owner.add_pet(pet)
    await repo.save(owner)
    return PetFormResult(
        state="persisted",
        redirect=f"/owners/{owner.id}",
        message=CREATED_MESSAGE,
        pet=pet,
    )


async def prepare_edit(repo: OwnerRepository, owner_id: str, pet_id: str) -> PetFormView:
    owner = await _load_owner(repo, owner_id)
    pet = _load_pet(owner, pet_id)
    return PetFormView(owner=owner, pet=pet, types=await repo.find_pet_types())


async def submit_edit(
    repo: OwnerRepository,
    owner_id: str,
    pet_id: str,
    form: PetForm,
    options: Optional[PetFormOptions] = None,
) -> PetFormResult:
    options = options or PetFormOptions()
    owner = await _load_owner(repo, owner_id)
    existing = _load_pet(owner, pet_id)
    types = {t.id: t for t in await repo.find_pet_types()}

    pet_type, errors = _bind_type(form, types, existing.type)
    # Copia de trabajo: el original no se toca hasta que todo valida
    pet = existing.model_copy(update={"name": form.name, "birth_date": form.birth_date, "type": pet_type})

    errors += _run_validators(pet, options)
    if _has_text(pet.name) and _is_duplicate_for_edit(owner, pet.name, pet_id):
        errors.append(FieldError(field="name", code=DUPLICATE, message="already exists"))
    errors += _check_birth_date(pet, options.today())

    if errors:
        return _rejected(form, pet, errors)

    existing.name = pet.name
    existing.birth_date = pet.birth_date
    existing.type = pet.type
    await repo.save(owner)
    return PetFormResult(
        state="persisted",
        redirect=f"/owners/{owner.id}",
        message=UPDATED_MESSAGE,
        pet=existing,
    )
