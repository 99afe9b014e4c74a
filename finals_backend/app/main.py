import datetime
import os
import uuid
from pathlib import Path

import uvicorn
from fastapi import APIRouter, BackgroundTasks, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from .api.models import ExamEntryModel, ParseRequest, ParseResponse, ProcessingResponse, ProcessingStatus
from .config import Settings
from .core.finals_processor import FinalsProcessor
from .utils.logger import setup_logger
from ..monitoring import MonitoringService
from ..utils.error_handler import UnrecognizedFormatError, ValidationError, handle_extraction_error

settings = Settings()
api_logger = setup_logger("finals_extractor")

# Store background tasks status
processing_tasks = {}

monitoring_service = MonitoringService(processing_tasks)

app = FastAPI(title="Finals Schedule Extractor API")

origins = [
    "http://localhost:5173",  # Vite dev server
    "http://localhost:8000",  # FastAPI server
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "Content-Type"],
)

api_router = APIRouter(prefix="/api")


def get_processor() -> FinalsProcessor:
    return FinalsProcessor(monitoring=monitoring_service)


@api_router.post("/finals/parse", response_model=ParseResponse)
async def parse_finals(request: ParseRequest):
    """
    Parse already-extracted finals schedule text synchronously
    """
    try:
        result = get_processor().parse_text(request.text, term=request.term, source="api")
    except ValidationError as e:
        return JSONResponse(status_code=400, content=handle_extraction_error(e))
    except UnrecognizedFormatError as e:
        return JSONResponse(status_code=422, content=handle_extraction_error(e))

    return ParseResponse(
        strategy=result.strategy,
        term=result.term,
        total=result.total,
        entries=[ExamEntryModel.from_entry(entry) for entry in result.entries],
    )


@api_router.post("/finals/process", response_model=ProcessingResponse)
async def process_finals(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    term: str = Form(...),
):
    """
    Store an uploaded finals schedule and process it in the background
    """
    content = await file.read()
    if len(content) > settings.MAX_FILE_SIZE:
        raise HTTPException(status_code=413, detail="File exceeds maximum upload size")
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    task_id = str(uuid.uuid4())
    try:
        upload_path = settings.UPLOAD_DIR / task_id / Path(file.filename or "schedule.pdf").name
        upload_path.parent.mkdir(parents=True, exist_ok=True)
        upload_path.write_bytes(content)
        api_logger.info(f"Stored file: {upload_path}")
    except OSError as e:
        api_logger.error(f"Failed to store file {file.filename}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to store file: {str(e)}")

    processing_tasks[task_id] = {"status": "processing", "progress": 0}

    background_tasks.add_task(
        get_processor().process_finals_files,
        task_id,
        [{'file_path': str(upload_path), 'term': term}],
        processing_tasks
    )

    return ProcessingResponse(task_id=task_id, status="processing")


@api_router.get("/status/{task_id}", response_model=ProcessingStatus)
async def get_status(task_id: str):
    """
    Get the status of a processing task
    """
    if task_id not in processing_tasks:
        return ProcessingStatus(status="not_found")

    return ProcessingStatus(
        status=processing_tasks[task_id]["status"],
        progress=processing_tasks[task_id].get("progress", 0),
        result=processing_tasks[task_id].get("result"),
        error=processing_tasks[task_id].get("error")
    )


@api_router.get("/download/{task_id}")
async def download_file(task_id: str):
    """Download the CSV export of a completed task."""
    if task_id not in processing_tasks:
        raise HTTPException(status_code=404, detail="Task not found")

    if processing_tasks[task_id]["status"] != "completed":
        raise HTTPException(status_code=400, detail="Task not completed yet")

    file_path = get_processor().csv_path(task_id)
    if not file_path.exists():
        raise HTTPException(status_code=404, detail="File not found")

    api_logger.info(f"Downloading file: {file_path}")
    return FileResponse(
        path=str(file_path),
        filename=file_path.name,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={file_path.name}"}
    )


@api_router.get("/health")
async def health_check():
    """Health check endpoint for the application"""
    try:
        system_status, warnings = monitoring_service.check_health()
        status = {
            "status": "healthy",
            "timestamp": datetime.datetime.now().isoformat(),
            "environment": settings.NODE_ENV,
            "system": system_status,
            "warnings": warnings,
        }

        for dir_name, dir_path in {
            "upload": settings.UPLOAD_DIR,
            "download": settings.DOWNLOAD_DIR,
            "logs": settings.LOGS_DIR
        }.items():
            if not dir_path.exists():
                status.update({
                    "status": "unhealthy",
                    "storage_error": f"{dir_name} directory not found"
                })

        return status
    except Exception as e:
        return {
            "status": "unhealthy",
            "timestamp": datetime.datetime.now().isoformat(),
            "error": str(e)
        }


app.include_router(api_router)


if __name__ == "__main__":
    port = int(os.getenv("API_PORT", 8000))
    uvicorn.run("finals_backend.app.main:app", host="0.0.0.0", port=port, reload=not settings.is_production)
