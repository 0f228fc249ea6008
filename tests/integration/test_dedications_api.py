import pytest

from portal.config.settings import settings

pytestmark = pytest.mark.integration


@pytest.fixture()
def memorial(create_memorial):
    return create_memorial()


def test_create_and_list_dedications(client, memorial):
    first = client.post(
        "/api/dedications",
        json={"memorial_id": memorial["id"], "author_name": " Ana ", "message": "Saudades eternas"},
    )
    assert first.status_code == 201
    assert first.json()["author_name"] == "Ana"

    client.post("/api/dedications", json={"memorial_id": memorial["id"], "author_name": "Rui", "message": "Obrigado"})

    listed = client.get("/api/dedications", params={"memorial_id": memorial["id"]}).json()
    # Mais recentes primeiro
    assert [d["author_name"] for d in listed] == ["Rui", "Ana"]


def test_missing_fields_return_business_message(client, memorial):
    response = client.post("/api/dedications", json={"memorial_id": memorial["id"], "author_name": "Ana"})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "memorial_id, author_name e message são obrigatórios"

    blank = client.post("/api/dedications", json={"memorial_id": memorial["id"], "author_name": "Ana", "message": "  "})
    assert blank.status_code == 400


def test_list_requires_memorial_id(client):
    response = client.get("/api/dedications")
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "memorial_id é obrigatório"


def test_dedication_on_unknown_memorial(client):
    response = client.post("/api/dedications", json={"memorial_id": 999, "author_name": "Ana", "message": "Oi"})
    assert response.status_code == 404


def test_dedication_on_private_memorial_is_forbidden(client, create_memorial):
    private = create_memorial(visibility="private")
    response = client.post("/api/dedications", json={"memorial_id": private["id"], "author_name": "A", "message": "B"})
    assert response.status_code == 403


def test_dedications_are_rate_limited_per_ip(client, memorial):
    payload = {"memorial_id": memorial["id"], "author_name": "Ana", "message": "Mensagem"}
    for _ in range(settings.security.dedication_requests_per_minute):
        assert client.post("/api/dedications", json=payload).status_code == 201

    blocked = client.post("/api/dedications", json=payload)
    assert blocked.status_code == 429
    assert blocked.json()["detail"] == "Muitas dedicatórias em sequência. Aguarde um minuto."
    assert int(blocked.headers["Retry-After"]) >= 1


def test_owner_and_admin_moderate(client, memorial, funeral_home, register_funeral_home, admin_headers):
    url = "/api/dedications"
    spam = client.post(url, json={"memorial_id": memorial["id"], "author_name": "X", "message": "spam"}).json()
    other = client.post(url, json={"memorial_id": memorial["id"], "author_name": "Y", "message": "spam"}).json()

    assert client.delete(f"{url}/{spam['id']}").status_code == 401

    stranger = register_funeral_home(email="estranha@funeraria.test")
    assert client.delete(f"{url}/{spam['id']}", headers=stranger["headers"]).status_code == 403

    assert client.delete(f"{url}/{spam['id']}", headers=funeral_home["headers"]).json() == {"success": True}
    assert client.delete(f"{url}/{other['id']}", headers=admin_headers).json() == {"success": True}
    assert client.get(url, params={"memorial_id": memorial["id"]}).json() == []
    assert client.delete(f"{url}/{spam['id']}", headers=admin_headers).status_code == 404
