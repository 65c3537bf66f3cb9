from decimal import Decimal
from urllib.parse import parse_qs, urlsplit

import pytest

from focusquote.quotes.application.schemas import StatusEventRequest
from focusquote.quotes.application.services import OWNER_EVENTS
from focusquote.quotes.domain.entities import QuoteStatus
from focusquote.quotes.interfaces.api import content_disposition

from conftest import CLIENT_ID, OWNER_ID

API = "/api/v1/quotes"
PUBLIC_API = "/api/v1/public/quotes"

QUOTE_BODY = {
    "client_id": CLIENT_ID,
    "date": "2024-05-10",
    "valid_until": "2024-05-25",
    "items": [
        {"name": "Ensaio externo", "unit_price": "300", "quantity": 2, "type": "hourly"},
        {"name": "Álbum", "unit_price": "50", "quantity": 1},
    ],
    "discount": "100",
    "extra_fees": "20",
    "payment_method": "pix",
}

async def _create(client, headers) -> dict:
    response = await client.post(f"{API}/", json=QUOTE_BODY, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()

@pytest.mark.asyncio
async def test_owner_header_is_required(test_client):
    response = await test_client.get(f"{API}/")
    assert response.status_code == 401

@pytest.mark.asyncio
async def test_create_and_read_quote(test_client, owner_headers):
    created = await _create(test_client, owner_headers)
    assert Decimal(created["subtotal"]) == Decimal("650")
    assert Decimal(created["total"]) == Decimal("570")
    assert created["status"] == "draft"
    assert created["status_label"] == "Rascunho"
    assert [Decimal(i["line_total"]) for i in created["items"]] == [Decimal("600"), Decimal("50")]

    response = await test_client.get(f"{API}/{created['id']}", headers=owner_headers)
    assert response.status_code == 200
    assert response.json()["number"] == created["number"]

@pytest.mark.asyncio
async def test_create_without_client_is_rejected(test_client, owner_headers):
    body = dict(QUOTE_BODY, client_id="")
    response = await test_client.post(f"{API}/", json=body, headers=owner_headers)
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "client_id"

    listing = await test_client.get(f"{API}/", headers=owner_headers)
    assert listing.json() == []

@pytest.mark.asyncio
async def test_quotes_are_owner_scoped(test_client, owner_headers):
    created = await _create(test_client, owner_headers)
    response = await test_client.get(f"{API}/{created['id']}", headers={"X-Owner-Id": "intruder"})
    assert response.status_code == 404

@pytest.mark.asyncio
async def test_update_and_status_events(test_client, owner_headers):
    created = await _create(test_client, owner_headers)

    response = await test_client.patch(f"{API}/{created['id']}/status", json={"event": "approve"}, headers=owner_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "approved"

    body = dict(QUOTE_BODY, discount="0")
    response = await test_client.put(f"{API}/{created['id']}", json=body, headers=owner_headers)
    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["total"]) == Decimal("670")
    assert data["status"] == "approved"
    assert data["warnings"]

    response = await test_client.patch(f"{API}/{created['id']}/status", json={"event": "teleport"}, headers=owner_headers)
    assert response.status_code == 400

@pytest.mark.asyncio
async def test_list_search_and_stats(test_client, owner_headers):
    created = await _create(test_client, owner_headers)

    response = await test_client.get(f"{API}/", params={"search": "maria"}, headers=owner_headers)
    assert [q["id"] for q in response.json()] == [created["id"]]

    response = await test_client.get(f"{API}/", params={"status": "approved"}, headers=owner_headers)
    assert response.json() == []

    stats = (await test_client.get(f"{API}/stats", headers=owner_headers)).json()
    assert stats["total_quotes"] == 1
    assert stats["pending_count"] == 1

@pytest.mark.asyncio
async def test_delete_makes_public_link_unresolvable(test_client, owner_headers):
    created = await _create(test_client, owner_headers)
    params = {"q": created["id"], "u": OWNER_ID}

    assert (await test_client.delete(f"{API}/{created['id']}", headers=owner_headers)).status_code == 204
    assert (await test_client.delete(f"{API}/{created['id']}", headers=owner_headers)).status_code == 404
    assert (await test_client.get(PUBLIC_API, params=params)).status_code == 404

@pytest.mark.asyncio
async def test_public_link_flow(test_client, owner_headers):
    created = await _create(test_client, owner_headers)
    await test_client.patch(f"{API}/{created['id']}/status", json={"event": "send"}, headers=owner_headers)

    link = (await test_client.get(f"{API}/{created['id']}/link", headers=owner_headers)).json()
    params = {k: v[0] for k, v in parse_qs(urlsplit(link["url"]).query).items()}
    assert params["view"] == "public"
    assert link["whatsapp_url"].startswith("https://wa.me/48991234567")

    # Consultation sans en-tête propriétaire
    public = await test_client.get(PUBLIC_API, params={"q": params["q"], "u": params["u"]})
    assert public.status_code == 200
    assert public.json()["quote"]["status"] == QuoteStatus.VIEWED.value
    assert public.json()["client"]["name"] == "Maria da Silva"

    for _ in range(2):
        approved = await test_client.post(f"{PUBLIC_API}/approve", params={"q": params["q"], "u": params["u"]})
        assert approved.status_code == 200
        assert approved.json()["status"] == "approved"

    owner_view = await test_client.get(f"{API}/{created['id']}", headers=owner_headers)
    assert owner_view.json()["status"] == "approved"

@pytest.mark.asyncio
async def test_public_quote_of_unknown_owner(test_client):
    response = await test_client.get(PUBLIC_API, params={"q": "x", "u": "nobody"})
    assert response.status_code == 404
    response = await test_client.post(f"{PUBLIC_API}/approve", params={"q": "x", "u": "nobody"})
    assert response.status_code == 404

@pytest.mark.asyncio
async def test_owner_document_preview(test_client, owner_headers):
    created = await _create(test_client, owner_headers)
    response = await test_client.get(f"{API}/{created['id']}/document", headers=owner_headers)
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert f"ORÇAMENTO #{created['number']}" in response.text
    assert "R$ 570,00" in response.text

@pytest.mark.asyncio
async def test_pdf_export_with_mock_generator(test_client_with_mock_pdf, owner_headers, mock_pdf_generator):
    client = test_client_with_mock_pdf
    created = await _create(client, owner_headers)

    response = await client.get(f"{API}/{created['id']}/pdf", headers=owner_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert f"Orcamento_{created['number']}_Maria_da_Silva.pdf" in response.headers["content-disposition"]
    assert mock_pdf_generator.documents[0].totals.grand_total.amount == Decimal("570")

    public = await client.get(f"{PUBLIC_API}/pdf", params={"q": created["id"], "u": OWNER_ID})
    assert public.status_code == 200
    assert public.content == response.content

@pytest.mark.asyncio
async def test_view_event_is_reserved_to_public_link(test_client, owner_headers):
    created = await _create(test_client, owner_headers)
    response = await test_client.patch(f"{API}/{created['id']}/status", json={"event": "view"}, headers=owner_headers)
    assert response.status_code == 400

    description = StatusEventRequest.model_fields["event"].description
    assert description.startswith(", ".join(OWNER_EVENTS[:-1]))
    assert OWNER_EVENTS[-1] in description

def test_content_disposition_escapes_client_name():
    header = content_disposition('Orcamento_1234_Joana_"JJ"_\\Fotos.pdf')
    ascii_part = header.split("; filename*=")[0]

    assert ascii_part == 'attachment; filename="Orcamento_1234_Joana_JJ_Fotos.pdf"'
    assert header.endswith("Orcamento_1234_Joana_%22JJ%22_%5CFotos.pdf")

def test_content_disposition_keeps_accents_in_utf8_part():
    header = content_disposition("Orcamento_1234_João.pdf")
    assert 'filename="Orcamento_1234_Joo.pdf"' in header
    assert "filename*=UTF-8''Orcamento_1234_Jo%C3%A3o.pdf" in header
