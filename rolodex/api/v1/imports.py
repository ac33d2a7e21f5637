"""Import endpoints for contact CSV data."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from rolodex.api.v1.common import data_response
from rolodex.core.auth import AuthContext, get_auth_context, require_owner
from rolodex.core.config import Settings, get_settings
from rolodex.core.db import get_session
from rolodex.schemas import ImportPreview, ImportSummary
from rolodex.services.contact_importer import CSV_TEMPLATE, ContactImportProcessor

router = APIRouter(prefix="/import", tags=["import"])


@router.post("/contacts/dry-run")
async def dry_run_import_contacts(
    file: UploadFile = File(...),
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
    settings: Settings = Depends(get_settings),
) -> dict[str, ImportPreview]:
    """Validate the provided CSV without mutating the database."""

    processor = ContactImportProcessor(
        session=session, auth=auth, batch_size=settings.import_batch_size
    )
    preview = await processor.preview(await file.read())
    return data_response(preview)


@router.post("/contacts")
async def import_contacts(
    file: UploadFile = File(...),
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
    settings: Settings = Depends(get_settings),
) -> dict[str, ImportSummary]:
    """Create contacts from the provided CSV and return a processing report."""

    processor = ContactImportProcessor(
        session=session, auth=auth, batch_size=settings.import_batch_size
    )
    summary = await processor.run(await file.read())
    return data_response(summary)


@router.get("/contacts/template.csv")
async def download_template(
    auth: AuthContext | None = Depends(get_auth_context),
) -> Response:
    """Return a sample CSV with the accepted columns."""

    require_owner(auth)
    return Response(
        content=CSV_TEMPLATE,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="contacts_template.csv"'},
    )
