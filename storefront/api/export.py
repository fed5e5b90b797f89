"""
storefront/api/export.py

Purpose: Users spreadsheet download
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response

from storefront.api.deps import get_settings, get_store
from storefront.core.config import Settings
from storefront.core.logging import get_logger
from storefront.db.store import Store
from storefront.services.export_service import XLSX_MEDIA_TYPE, export_users_xlsx

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["Export"])


@router.get("/export-users")
async def export_users(store: Store = Depends(get_store), settings: Settings = Depends(get_settings)):
    users = await store.list_users()
    if not users:
        return PlainTextResponse("No user data to export.", status_code=404)

    try:
        content = export_users_xlsx(users)
    except Exception as e:
        logger.error(f"Error exporting data to Excel: {e}", exc_info=True)
        return PlainTextResponse("An error occurred while generating the Excel file.", status_code=500)

    logger.info(f"Exported {len(users)} users")
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={settings.EXPORT_FILENAME}"},
    )
