import pytest
from pydantic import ValidationError as PydanticValidationError

from portal.presentation.schemas.auth_schemas import FuneralHomeRegisterIn, LoginIn
from portal.presentation.schemas.commerce_schemas import LeadCreate, PaymentIntentCreate
from portal.presentation.schemas.memorial_schemas import (
    DedicationCreate,
    DescendantCreate,
    MemorialCreate,
    MemorialUpdate,
    PhotoCreate,
)

pytestmark = pytest.mark.unit


def test_login_normalizes_email():
    assert LoginIn(email="  Contato@Funeraria.COM ", password="x").email == "contato@funeraria.com"


@pytest.mark.parametrize("email", ["sem-arroba", "a@b", "a b@c.com", ""])
def test_invalid_emails_are_rejected(email):
    with pytest.raises(PydanticValidationError):
        LoginIn(email=email, password="x")


def test_register_strips_name_and_rejects_blank():
    assert FuneralHomeRegisterIn(name="  Paz  ", email="a@b.com", password="123456").name == "Paz"
    with pytest.raises(PydanticValidationError):
        FuneralHomeRegisterIn(name="   ", email="a@b.com", password="123456")


@pytest.mark.parametrize("value", ["1849", "1849-08", "1849-08-19"])
def test_memorial_accepts_partial_dates(value):
    assert MemorialCreate(full_name="Joaquim", birth_date=value).birth_date == value


@pytest.mark.parametrize("value", ["19/08/1849", "1849-8-19", "ontem"])
def test_memorial_rejects_malformed_dates(value):
    with pytest.raises(PydanticValidationError):
        MemorialCreate(full_name="Joaquim", death_date=value)


def test_memorial_create_defaults_and_email_normalization():
    data = MemorialCreate(full_name="  José  ", family_email=" FAMILIA@Silva.com ")
    assert data.full_name == "José"
    assert data.family_email == "familia@silva.com"
    assert data.visibility == "public"
    assert data.status is None


def test_memorial_create_treats_blank_family_email_as_missing():
    assert MemorialCreate(full_name="José", family_email="  ").family_email is None


def test_memorial_rejects_unknown_visibility():
    with pytest.raises(PydanticValidationError):
        MemorialCreate(full_name="José", visibility="secreto")


def test_memorial_update_tracks_only_sent_fields():
    data = MemorialUpdate(biography="Nova biografia", main_photo=None)
    assert data.model_dump(exclude_unset=True) == {"biography": "Nova biografia", "main_photo": None}


def test_descendant_and_photo_validation():
    assert DescendantCreate(name=" Ana ", relationship=" filha ").relationship == "filha"
    with pytest.raises(PydanticValidationError):
        PhotoCreate(file_url="https://cdn.test/a.jpg", sort_order=-1)


def test_dedication_fields_are_optional_for_business_validation():
    data = DedicationCreate(author_name="  Ana ", message=" Saudades ")
    assert data.memorial_id is None
    assert data.author_name == "Ana"
    assert data.message == "Saudades"


def test_payment_intent_rejects_unknown_method():
    with pytest.raises(PydanticValidationError):
        PaymentIntentCreate(plan_id="premium", payment_method="cheque")


def test_lead_create_normalizes_fields():
    lead = LeadCreate(name=" Carla ", email="Carla@Empresa.com")
    assert lead.name == "Carla"
    assert lead.email == "carla@empresa.com"
    assert lead.accept_emails is False
