from __future__ import annotations

import csv
import io
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from rolodex.services.contact_importer import ContactImportProcessor

HEADER = "first_name,last_name,email,phone,company,position,location,url,connected_on,notes\n"


def _upload(content: str):
    return {"file": ("contacts.csv", content.encode("utf-8"), "text/csv")}


@pytest.mark.anyio("asyncio")
async def test_import_creates_valid_rows_and_reports_the_rest(client):
    content = (
        HEADER
        + 'John,Doe,john@example.com,,Acme Inc,PM,"Austin, TX",,2024-01-15,"Met at ""Tech"" Conf"\n'
        + "Jane,Smith,,,XYZ Corp,CEO,London,,15/01/2024,\n"
        + "No,Company,,,,CTO,Paris,,,\n"
        + "Bad,Email,not-an-email,,Corp,CTO,Rome,,,\n"
    )

    response = await client.post("/api/v1/import/contacts", files=_upload(content))

    assert response.status_code == 200, response.text
    summary = response.json()["data"]
    assert summary["total"] == 4
    assert summary["created"] == 3
    assert summary["skipped"] == 1
    assert summary["failed"] == 0
    assert [error["row"] for error in summary["errors"]] == [3]
    assert summary["errors"][0]["message"] == "company is required"

    contacts = (await client.get("/api/v1/contacts")).json()["data"]
    by_name = {c["first_name"]: c for c in contacts}
    assert by_name["John"]["location"] == "Austin, TX"
    assert by_name["John"]["notes"] == 'Met at "Tech" Conf'
    assert by_name["John"]["connected_on"] == "2024-01-15"
    assert by_name["Jane"]["connected_on"] == date.today().isoformat()
    assert by_name["Bad"]["email"] is None
    assert by_name["Bad"]["company"] == "Corp"


@pytest.mark.anyio("asyncio")
async def test_import_keeps_rows_with_invalid_optional_values(client):
    content = (
        HEADER
        + "Short,Phone,,12345,Acme,PM,Austin,,,\n"
        + "Ext,Phone,,555-1234 x9,Acme,PM,Austin,,,\n"
        + "Grace,Hopper,grace@navy,555-123-4567,Navy,Admiral,Arlington,,,\n"
    )

    response = await client.post("/api/v1/import/contacts", files=_upload(content))

    summary = response.json()["data"]
    assert summary["created"] == 3
    assert summary["skipped"] == 0
    assert summary["errors"] == []

    contacts = (await client.get("/api/v1/contacts")).json()["data"]
    by_name = {c["first_name"]: c for c in contacts}
    assert by_name["Short"]["phone"] is None
    assert by_name["Ext"]["phone"] is None
    assert by_name["Grace"]["email"] is None
    assert by_name["Grace"]["phone"] == "555-123-4567"


@pytest.mark.anyio("asyncio")
async def test_import_rejects_file_missing_required_columns(client):
    response = await client.post(
        "/api/v1/import/contacts", files=_upload("first_name,last_name,email\nA,B,a@b.com\n")
    )

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_IMPORT_FILE"
    assert "company" in error["message"]


@pytest.mark.anyio("asyncio")
async def test_import_dry_run_writes_nothing(client):
    content = HEADER + "John,Doe,,,Acme,PM,Austin,,,\n" + ",,,,,,,,,\n"

    response = await client.post("/api/v1/import/contacts/dry-run", files=_upload(content))

    preview = response.json()["data"]
    assert preview["valid"] == 1
    assert preview["invalid"] == 1
    assert preview["sample"][0]["parsed"]["first_name"] == "John"
    assert (await client.get("/api/v1/contacts")).json()["data"] == []


@pytest.mark.anyio("asyncio")
async def test_failed_batch_does_not_stop_later_batches(client, monkeypatch):
    original = ContactImportProcessor._insert_batch
    calls = {"count": 0}

    async def flaky_insert(self, batch):
        calls["count"] += 1
        if calls["count"] == 1:
            raise OperationalError("INSERT INTO contacts", {}, Exception("database is locked"))
        await original(self, batch)

    monkeypatch.setattr(ContactImportProcessor, "_insert_batch", flaky_insert)
    rows = "".join(f"Person{i},Example,,,Acme,PM,Austin,,,\n" for i in range(5))

    response = await client.post("/api/v1/import/contacts", files=_upload(HEADER + rows))

    summary = response.json()["data"]
    assert calls["count"] == 3
    assert summary["failed"] == 2
    assert summary["created"] == 3
    names = {c["first_name"] for c in (await client.get("/api/v1/contacts")).json()["data"]}
    assert names == {"Person2", "Person3", "Person4"}


@pytest.mark.anyio("asyncio")
async def test_template_download_lists_import_columns(client):
    response = await client.get("/api/v1/import/contacts/template.csv")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.text.splitlines()[0] == HEADER.strip()


@pytest.mark.anyio("asyncio")
async def test_export_uses_import_layout_and_tag_filter(client):
    tag = (await client.post("/api/v1/tags", json={"name": "VIP"})).json()["data"]
    await client.post(
        "/api/v1/contacts",
        json={
            "first_name": "Ada",
            "last_name": "Lovelace",
            "company": "Analytical Engines",
            "position": "Mathematician",
            "location": "London, UK",
            "connected_on": "2024-01-15",
            "tag_ids": [tag["id"]],
        },
    )
    await client.post(
        "/api/v1/contacts",
        json={
            "first_name": "Alan",
            "last_name": "Turing",
            "company": "Bletchley Park",
            "position": "Cryptanalyst",
            "location": "Bletchley",
        },
    )

    everyone = await client.get("/api/v1/export/contacts.csv")
    rows = list(csv.DictReader(io.StringIO(everyone.text)))
    assert [row["first_name"] for row in rows] == ["Ada", "Alan"]
    assert rows[0]["location"] == "London, UK"
    assert rows[0]["connected_on"] == "2024-01-15"
    assert rows[0]["tags"] == "VIP"

    vip_only = await client.get("/api/v1/export/contacts.csv", params={"tag_ids": str(tag["id"])})
    assert [row["first_name"] for row in csv.DictReader(io.StringIO(vip_only.text))] == ["Ada"]
