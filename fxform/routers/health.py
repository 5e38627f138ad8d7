from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request):
    page = request.app.state.page
    return {
        "status": "ok",
        "version": request.app.state.settings.version,
        "catalog_loaded": page.loaded,
    }
