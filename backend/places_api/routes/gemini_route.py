import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from places_api.models.places_model import GatewayRequest
from places_api.services.place_query_service import PlaceQueryService
from places_api.core.exceptions import PlaceQueryError
from places_api.core.llm_connection import LLMService, llm_client
from places_api.core.config import settings
from places_api.core.logger import logs

router = APIRouter()

# --- Dependency Injection ---
def get_llm_service() -> LLMService:
    return llm_client

def get_place_query_service(llm: LLMService = Depends(get_llm_service)) -> PlaceQueryService:
    return PlaceQueryService(llm)

# --- The Endpoint ---
@router.post("/api/gemini")
async def gemini_endpoint(
    request: GatewayRequest,
    service: PlaceQueryService = Depends(get_place_query_service)
):
    """
    Single gateway for the web client: `{action, payload}` in, JSON result out.
    Errors are answered as `{"error": message}`.
    """
    missing_key = settings.missing_api_key()
    if missing_key:
        logs.log(logging.ERROR, f"{missing_key} is not configured")
        return JSONResponse(status_code=500, content={"error": f"{missing_key} environment variable is not set"})

    try:
        return await service.dispatch(request.action, request.payload)
    except PlaceQueryError as e:
        logs.log(logging.WARNING, f"Rejected {request.action}: {e.message}")
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    except Exception:
        logs.exception(f"Error processing {request.action} request")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch data from Gemini API."})
