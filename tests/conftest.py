"""
Configuración de pytest para tests
"""
from datetime import date
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from petclinic.errors import PersistenceError
from petclinic.schemas.owner import Owner, Pet, PetType

TODAY = date(2024, 6, 1)

DOG = PetType(id="t-dog", name="dog")
CAT = PetType(id="t-cat", name="cat")
HAMSTER = PetType(id="t-hamster", name="hamster")


class InMemoryOwnerRepository:
    """Repositorio en memoria: cada find devuelve una copia, como una carga fresca por petición."""

    def __init__(self, owners: List[Owner], types: List[PetType]):
        self.owners: Dict[str, Owner] = {o.id: o for o in owners}
        self.types = types
        self.save_calls = 0
        self.fail_on_save = False
        self._next_pet_id = 100

    async def find_by_id(self, owner_id: str) -> Optional[Owner]:
        owner = self.owners.get(owner_id)
        return owner.model_copy(deep=True) if owner else None

    async def save(self, owner: Owner) -> None:
        self.save_calls += 1
        if self.fail_on_save:
            raise PersistenceError("database unavailable")
        for pet in owner.pets:
            if pet.is_new:
                self._next_pet_id += 1
                pet.id = str(self._next_pet_id)
            pet.owner_id = owner.id
        self.owners[owner.id] = owner.model_copy(deep=True)

    async def find_pet_types(self) -> List[PetType]:
        return sorted(self.types, key=lambda t: t.name)


# Deshabilitar rate limiting en la app antes de usarla
@pytest.fixture(scope="session", autouse=True)
def disable_rate_limiting():
    """Deshabilita rate limiting para todos los tests"""
    from petclinic.main import app
    app.state.limiter = None

@pytest.fixture
def repo():
    """Owner #1 con "Rex" y "Milo"; owner #2 sin mascotas"""
    owner1 = Owner(
        id="1",
        first_name="George",
        last_name="Franklin",
        city="Madison",
        pets=[
            Pet(id="10", name="Rex", birth_date=date(2019, 3, 2), type=DOG, owner_id="1"),
            Pet(id="11", name="Milo", birth_date=date(2021, 7, 15), type=CAT, owner_id="1"),
        ],
    )
    owner2 = Owner(id="2", first_name="Betty", last_name="Davis", city="Sun Prairie")
    return InMemoryOwnerRepository([owner1, owner2], [DOG, CAT, HAMSTER])

@pytest.fixture
def options():
    from petclinic.services.pet_form import PetFormOptions
    return PetFormOptions(today=lambda: TODAY)

@pytest.fixture
def app_with_repo(repo, options):
    """App con el repositorio en memoria y la fecha fija inyectados"""
    from petclinic.main import app
    from petclinic.repository import get_owner_repository
    from petclinic.routers.pets import get_form_options

    app.dependency_overrides[get_owner_repository] = lambda: repo
    app.dependency_overrides[get_form_options] = lambda: options
    yield app
    app.dependency_overrides.clear()

@pytest.fixture
def client(app_with_repo):
    """Fixture para cliente de test de FastAPI"""
    return TestClient(app_with_repo)
