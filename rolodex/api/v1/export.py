"""Export endpoints for contact data."""
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from rolodex.api.v1.common import parse_id_list
from rolodex.core.auth import AuthContext, get_auth_context
from rolodex.core.db import get_session
from rolodex.services.contact_exporter import export_contacts_csv

router = APIRouter(prefix="/export", tags=["export"])


@router.get("/contacts.csv")
async def export_contacts(
    tag_ids: list[int] = Depends(parse_id_list),
    session: AsyncSession = Depends(get_session),
    auth: AuthContext | None = Depends(get_auth_context),
) -> Response:
    """Export contacts to CSV, optionally only those carrying any of ``tag_ids``."""

    content = await export_contacts_csv(session, auth, tag_ids)
    filename = f"contacts_{datetime.now().strftime('%Y%m%d')}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
