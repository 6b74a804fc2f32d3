# petclinic/routers/pets.py
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
import logging

from ..config import get_settings
from ..middleware.rate_limit import apply_rate_limit
from ..repository import OwnerRepository, get_owner_repository
from ..schemas.owner import PetType
from ..schemas.pet import PetForm, PetFormResult, PetFormView
from ..services import pet_form
from ..services.pet_form import PetFormOptions, DUPLICATE, TYPE_MISMATCH

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()

def get_form_options() -> PetFormOptions:
    """Opciones por petición; los tests la sustituyen para fijar la fecha."""
    return PetFormOptions()

def _log_rejection(result: PetFormResult, what: str):
    for err in result.errors:
        if err.code == DUPLICATE:
            logger.warning("Attempt to %s a pet with duplicate name: %s", what, result.form.name)
        elif err.field == "birth_date" and err.code == TYPE_MISMATCH:
            logger.warning("Invalid date of birth for pet: %s", result.form.birth_date)
    logger.warning("Validation errors when trying to %s pet: %s", what, [e.model_dump() for e in result.errors])

def _rejected_response(result: PetFormResult) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=result.model_dump(mode="json"),
    )

@router.get("/types", response_model=list[PetType])
async def list_pet_types(owner_id: str, repo: OwnerRepository = Depends(get_owner_repository)):
    return await pet_form.list_pet_types(repo, owner_id)

@router.get("/new", response_model=PetFormView)
async def init_creation_form(owner_id: str, repo: OwnerRepository = Depends(get_owner_repository)):
    view = await pet_form.prepare_create(repo, owner_id)
    logger.info("Starting creation form for a new pet of owner %s", owner_id)
    return view

@router.post("/new", response_model=PetFormResult, status_code=status.HTTP_201_CREATED)
async def process_creation_form(
    owner_id: str,
    payload: PetForm,
    request: Request,
    repo: OwnerRepository = Depends(get_owner_repository),
    options: PetFormOptions = Depends(get_form_options),
):
    apply_rate_limit(request, settings.form_rate_limit)
    logger.info("Processing new pet creation form for owner ID: %s", owner_id)

    result = await pet_form.submit_create(repo, owner_id, payload, options)
    if not result.ok:
        _log_rejection(result, "create")
        return _rejected_response(result)

    logger.info("New pet %s was added to owner %s", result.pet.id, owner_id)
    return result

@router.get("/{pet_id}/edit", response_model=PetFormView)
async def init_update_form(owner_id: str, pet_id: str, repo: OwnerRepository = Depends(get_owner_repository)):
    view = await pet_form.prepare_edit(repo, owner_id, pet_id)
    logger.info("Starting edit form for pet %s of owner %s", pet_id, owner_id)
    return view

@router.post("/{pet_id}/edit", response_model=PetFormResult)
async def process_update_form(
    owner_id: str,
    pet_id: str,
    payload: PetForm,
    request: Request,
    repo: OwnerRepository = Depends(get_owner_repository),
    options: PetFormOptions = Depends(get_form_options),
):
    apply_rate_limit(request, settings.form_rate_limit)
    logger.info("Processing edit form for pet ID: %s for owner ID: %s", pet_id, owner_id)

    result = await pet_form.submit_edit(repo, owner_id, pet_id, payload, options)
    if not result.ok:
        _log_rejection(result, "update")
        return _rejected_response(result)

    logger.info("Pet with the ID: %s updated successfully. ID owner: %s", pet_id, owner_id)
    return result
