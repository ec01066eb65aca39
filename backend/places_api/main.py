import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from places_api.routes.gemini_route import router as gemini_router
from places_api.core.logger import logs

app = FastAPI(title="Nearby Places API")
app.include_router(gemini_router)

# --- Error envelope: every failure is answered as {"error": message} ---
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logs.log(logging.WARNING, f"Invalid request body for {request.url.path}", extra={"errors": len(exc.errors())})
    return JSONResponse(status_code=400, content={"error": "Request body must be {action, payload}."})

# --- Root Endpoint ---
@app.get("/")
async def root():
    return {
        "message": "Welcome to Nearby Places API",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "gateway": "/api/gemini",
            "docs": "/docs"
        },
        "version": "1.0.0"
    }

# --- Health Check ---
@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "Nearby Places API"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("places_api.main:app", host="0.0.0.0", port=8000, reload=True)
