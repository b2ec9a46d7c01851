# tests/test_registration_service.py
import asyncio
import random
import re
from datetime import date

import pytest

from app.modules.employees.errors import (
    ConflictFailure,
    DependencyFailure,
    PhotoUploadError,
    ValidationFailure,
)
from app.modules.employees.matricule import MatriculeAllocator
from app.modules.employees.schemas import RegistrationIn
from app.modules.employees.service import RegistrationService
from tests.conftest import VALID_PAYLOAD
from tests.fakes import (
    FailingInsertStore,
    FailingUpdateStore,
    FakeUploader,
    InMemoryEmployeeStore,
    UnreachableStore,
)

TODAY = date(2024, 6, 1)


class SpyNotifier:
    def __init__(self, exc: Exception | None = None):
        self.messages = []
        self.exc = exc

    def submit(self, message):
        if self.exc is not None:
            raise self.exc
        self.messages.append(message)
        return True


def _service(store, **kwargs) -> RegistrationService:
    allocator = MatriculeAllocator(clock=lambda: TODAY, rng=random.Random(0))
    return RegistrationService(store, allocator, clock=lambda: TODAY, **kwargs)


def _req(**overrides) -> RegistrationIn:
    return RegistrationIn.model_validate({**VALID_PAYLOAD, **overrides})


def test_inscription_cree_un_enregistrement():
    store = InMemoryEmployeeStore()
    result = asyncio.run(_service(store).register(_req()))

    assert re.fullmatch(r"NOV-KJ-2024-\d{5}", result.matricule)
    assert re.fullmatch(r"EMP-\d{5}", result.qr_id)
    assert result.employee_id == "rec00001"
    fields = store.records[0]["fields"]
    assert fields["matricule"] == result.matricule
    assert fields["date_naissance"] == "1990-01-01"
    assert fields["date_inscription"] == "2024-06-01"
    assert fields["actif"] is True
    assert "email" not in fields and "photo_url" not in fields


def test_champs_nettoyes_avant_enregistrement():
    store = InMemoryEmployeeStore()
    asyncio.run(_service(store).register(_req(nom=" Kouame ", email=" jean@novatech.ci ", telephone="+225 07 08 09 10")))
    fields = store.records[0]["fields"]
    assert fields["nom"] == "Kouame"
    assert fields["email"] == "jean@novatech.ci"
    assert fields["telephone"] == "+22507080910"


def test_validation_echoue_avant_toute_requete():
    store = InMemoryEmployeeStore()
    with pytest.raises(ValidationFailure) as exc:
        asyncio.run(_service(store).register(_req(confirmPin="9999")))
    assert "confirmPin" in exc.value.errors
    assert store.lookups == 0
    assert store.records == []


def test_pin_deja_pris_conflit_idempotent():
    store = InMemoryEmployeeStore()
    service = _service(store)
    asyncio.run(service.register(_req()))

    for _ in range(2):
        with pytest.raises(ConflictFailure):
            asyncio.run(service.register(_req(nom="Traore", prenom="Awa")))
    assert len(store.with_pin("1234")) == 1


def test_pin_d_un_employe_inactif_reutilisable():
    store = InMemoryEmployeeStore()
    asyncio.run(store.create_employee({"pin": "1234", "actif": False}))
    asyncio.run(_service(store).register(_req()))
    assert len(store.with_pin("1234")) == 2


def test_lookup_indisponible_devient_dependency_failure():
    store = UnreachableStore()
    with pytest.raises(DependencyFailure) as exc:
        asyncio.run(_service(store).register(_req()))
    assert exc.value.message == "Erreur lors de la vérification du PIN"
    assert store.records == []


def test_echec_insertion_devient_dependency_failure():
    with pytest.raises(DependencyFailure) as exc:
        asyncio.run(_service(FailingInsertStore()).register(_req()))
    assert "INVALID_PERMISSIONS" not in exc.value.message


def test_notification_envoyee_si_email():
    notifier = SpyNotifier()
    result = asyncio.run(_service(InMemoryEmployeeStore(), notifier=notifier).register(_req(email="jean@novatech.ci")))
    (message,) = notifier.messages
    assert message.to == "jean@novatech.ci"
    assert result.matricule in message.html
    assert "1234" not in message.html


def test_pas_de_notification_sans_email():
    notifier = SpyNotifier()
    asyncio.run(_service(InMemoryEmployeeStore(), notifier=notifier).register(_req()))
    assert notifier.messages == []


def test_notification_en_echec_n_affecte_pas_le_resultat():
    notifier = SpyNotifier(exc=RuntimeError("queue fermée"))
    store = InMemoryEmployeeStore()
    result = asyncio.run(_service(store, notifier=notifier).register(_req(email="jean@novatech.ci")))
    assert result.employee_id == "rec00001"


def test_photo_envoyee_et_referencee():
    uploader = FakeUploader()
    store = InMemoryEmployeeStore()
    result = asyncio.run(_service(store, uploader=uploader).register(_req(photo="data:image/png;base64,AAAA")))
    assert result.photo_url == uploader.url
    assert store.records[0]["fields"]["photo_url"] == uploader.url
    assert uploader.calls == [("data:image/png;base64,AAAA", result.matricule)]


def test_photo_en_echec_inscription_sans_photo():
    uploader = FakeUploader(exc=PhotoUploadError("photo_upload_failed", "boom", status_code=500))
    store = InMemoryEmployeeStore()
    result = asyncio.run(_service(store, uploader=uploader).register(_req(photo="AAAA")))
    assert result.photo_url is None
    assert "photo_url" not in store.records[0]["fields"]


def test_pas_d_upload_si_la_creation_echoue():
    uploader = FakeUploader()
    with pytest.raises(DependencyFailure):
        asyncio.run(_service(FailingInsertStore(), uploader=uploader).register(_req(photo="AAAA")))
    assert uploader.calls == []


def test_photo_envoyee_apres_creation():
    store = InMemoryEmployeeStore()

    class OrderedUploader(FakeUploader):
        async def upload(self, data, *, public_id=None):
            assert len(store.records) == 1  # enregistrement déjà créé
            return await super().upload(data, public_id=public_id)

    result = asyncio.run(_service(store, uploader=OrderedUploader()).register(_req(photo="AAAA")))
    assert store.records[0]["fields"]["photo_url"] == result.photo_url


def test_photo_non_rattachee_inscription_maintenue():
    store = FailingUpdateStore()
    uploader = FakeUploader()
    result = asyncio.run(_service(store, uploader=uploader).register(_req(photo="AAAA")))
    assert result.employee_id == "rec00001"
    assert result.photo_url is None
    assert "photo_url" not in store.records[0]["fields"]


def test_disponibilite_pin():
    store = InMemoryEmployeeStore()
    service = _service(store)
    assert asyncio.run(service.check_pin_available("5678")) is True
    asyncio.run(service.register(_req(pin="5678", confirmPin="5678")))
    assert asyncio.run(service.check_pin_available("5678")) is False
