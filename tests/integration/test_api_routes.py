"""
Integration tests for the HTTP routes.
"""

import os

from app.domain.models.order import Order
from tests.helpers.order_exports import export_row

XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


async def upload_export(client, path, name="orders.xlsx"):
    with open(path, "rb") as f:
        return await client.post("/api/import-orders", files={"orderFile": (name, f.read(), XLSX_TYPE)})


async def test_import_is_accepted_then_completes(client, ingestion_service, write_order_export, tmp_path):
    path = write_order_export([export_row("INV-001"), export_row("INV-002")])

    response = await upload_export(client, path)

    assert response.status_code == 202
    body = response.json()
    assert body["message"] == "Import started successfully in the background."
    job_id = body["job_id"]

    await ingestion_service.wait_for_all()

    status_response = await client.get(f"/api/import-status/{job_id}")
    assert status_response.status_code == 200
    state = status_response.json()
    assert state["status"] == "COMPLETED"
    assert state["summary"] == {
        "total_processed": 2,
        "successful_inserts": 2,
        "failed_inserts": 0,
        "skipped_duplicates": 0,
    }
    assert state["error"] is None
    # Uploaded copy is cleaned up once the run ends
    assert os.listdir(tmp_path / "uploads") == []


async def test_import_rejects_other_file_types(client):
    response = await client.post(
        "/api/import-orders",
        files={"orderFile": ("orders.pdf", b"%PDF-1.4", "application/pdf")},
    )

    assert response.status_code == 400


async def test_import_requires_the_file_field(client):
    response = await client.post("/api/import-orders", files={"file": ("orders.csv", b"a,b\n", "text/csv")})

    assert response.status_code == 422


async def test_unknown_job_is_404(client):
    response = await client.get("/api/import-status/does-not-exist")

    assert response.status_code == 404
    error = response.json()["error"]
    assert error["message"] == "Job ID not found."
    assert error["details"] == {"job_id": "does-not-exist"}


async def test_failed_run_is_reported_in_status(client, ingestion_service):
    response = await client.post(
        "/api/import-orders",
        files={"orderFile": ("orders.xlsx", b"not a workbook", XLSX_TYPE)},
    )
    job_id = response.json()["job_id"]

    await ingestion_service.wait_for_all()

    state = (await client.get(f"/api/import-status/{job_id}")).json()
    assert state["status"] == "FAILED"
    assert state["error"]


async def test_delta_audit_over_json_body(client, ingestion_service, write_order_export):
    ingestion_service.start_ingestion(write_order_export([export_row("A"), export_row("B"), export_row("C")]))
    await ingestion_service.wait_for_all()

    response = await client.post("/api/reconciliation/delta", json={"bill_numbers": ["B", "C", "D", "D"]})

    assert response.status_code == 200
    assert response.json() == {
        "source_count": 3,
        "persisted_count": 3,
        "matched_count": 2,
        "missing": ["D"],
        "extra": ["A"],
    }


async def test_delta_audit_over_csv_upload(client, ingestion_service, write_order_export):
    ingestion_service.start_ingestion(write_order_export([export_row("1001"), export_row("1002")]))
    await ingestion_service.wait_for_all()

    csv = b"Invoice Number,Item\n1001,x\n1001,y\n1003,z\n"
    response = await client.post("/api/reconciliation/delta/upload", files={"sourceFile": ("export.csv", csv, "text/csv")})

    assert response.status_code == 200
    body = response.json()
    assert body["matched_count"] == 1
    assert body["missing"] == ["1003"]
    assert body["extra"] == ["1002"]


async def test_delta_audit_over_latin1_csv_upload(client, ingestion_service, write_order_export):
    ingestion_service.start_ingestion(write_order_export([export_row("1001")]))
    await ingestion_service.wait_for_all()

    csv = "Invoice Number,Party\n1001,José\n".encode("latin-1")
    response = await client.post("/api/reconciliation/delta/upload", files={"sourceFile": ("export.csv", csv, "text/csv")})

    assert response.status_code == 200
    body = response.json()
    assert body["matched_count"] == 1
    assert body["missing"] == []


async def test_delta_upload_without_bill_column_is_422(client):
    response = await client.post(
        "/api/reconciliation/delta/upload",
        files={"sourceFile": ("export.csv", b"Bill,Item\n1,x\n", "text/csv")},
    )

    assert response.status_code == 422


async def test_purge_deletes_everything(client, ingestion_service, write_order_export, fetch_all):
    ingestion_service.start_ingestion(write_order_export([export_row("INV-001")]))
    await ingestion_service.wait_for_all()

    response = await client.delete("/api/purge-data")

    assert response.status_code == 200
    body = response.json()
    assert body["deleted"] == {"order_items": 1, "orders": 1, "customers": 1, "products": 1}
    assert await fetch_all(Order) == []


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
