"""
Workout API endpoints.
"""
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field, ValidationError

from app.api.deps import get_extraction_service, get_workout_store
from app.core.config import settings
from app.core.logging import get_logger
from app.models.workout import ExtractedWorkout, Workout, WorkoutCreate, WorkoutUpdate
from app.services.ai import ExtractionError, ImageExtractionService
from app.services.ingest import (
    CSV_TEMPLATE,
    CSV_TEMPLATE_FILENAME,
    CsvFormatError,
    CsvWorkoutRow,
    parse_csv,
    upload_rows,
)
from app.services.sheets import SheetsError, WorkoutStore
from app.services.workouts import load_workouts

logger = get_logger(__name__)
router = APIRouter()


# ========================================
# Request/Response Schemas
# ========================================

class MutationResponse(BaseModel):
    """Result of an add, update or delete."""
    success: bool
    message: Optional[str] = None


class SheetLoadResponse(BaseModel):
    """Diagnostic read straight from the sheet."""
    success: bool
    workouts: list[Workout] = Field(default_factory=list)
    message: Optional[str] = None
    error: Optional[str] = None
    debug: Optional[dict[str, Any]] = None


class ImageExtractionResponse(BaseModel):
    """Extraction result awaiting human confirmation."""
    success: bool
    workoutData: Optional[ExtractedWorkout] = None
    error: Optional[str] = None


class CsvPreviewResponse(BaseModel):
    """Validated rows and counts; nothing is saved."""
    rows: list[CsvWorkoutRow]
    total: int
    valid: int
    invalid: int
    message: str


class CsvUploadResponse(BaseModel):
    """Outcome of a bulk CSV upload."""
    successCount: int
    errorCount: int
    invalidCount: int
    failedRows: list[int] = Field(default_factory=list)
    message: str


# ========================================
# Helpers
# ========================================

def _describe_sheet_error(error: Exception) -> str:
    """Map common Google Sheets failures to actionable messages."""
    text = str(error)
    lowered = text.lower()

    if "enotfound" in lowered or "network" in lowered or "connection" in lowered:
        return "Network error - check your internet connection"
    if "credentials" in lowered or "authentication" in lowered or "invalid_grant" in lowered:
        return "Authentication failed - check your Google service account credentials"
    if "permission" in lowered or "forbidden" in lowered or "403" in lowered:
        return "Permission denied - make sure you shared the sheet with your service account"
    if "not found" in lowered or "404" in lowered:
        return "Sheet not found - check your GOOGLE_SHEET_ID and GOOGLE_SHEET_NAME"
    return text or "Failed to load from Google Sheets"


async def _read_upload(file: UploadFile) -> str:
    content = await file.read()
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded")


# ========================================
# API Endpoints
# ========================================

@router.get("", response_model=list[Workout])
async def list_workouts(
    store: WorkoutStore = Depends(get_workout_store),
):
    """
    Get all workouts.

    Falls back to the demo dataset when the sheet is unavailable.
    """
    snapshot = await load_workouts(store)
    return snapshot.workouts


@router.post("/add", response_model=MutationResponse)
async def add_workout(
    request: WorkoutCreate,
    store: WorkoutStore = Depends(get_workout_store),
):
    """
    Add a single workout.

    In demo mode the write is simulated and nothing is persisted.
    """
    if not store.is_configured():
        logger.info("Google Sheets not configured, simulating success for demo")
        return MutationResponse(
            success=True,
            message="Demo mode: Workout would be added to Google Sheets",
        )

    try:
        await store.append_workout(request.to_workout())
    except SheetsError as e:
        logger.error("Error adding workout", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to add workout")

    return MutationResponse(success=True)


@router.get("/google-sheets", response_model=SheetLoadResponse)
async def load_from_google_sheets(
    store: WorkoutStore = Depends(get_workout_store),
):
    """
    Load workouts directly from the sheet, without demo fallback.

    Used to check the sheet connection; failures come back with a
    human-readable explanation.
    """
    try:
        workouts = await store.get_workouts()
    except SheetsError as e:
        logger.error("Error loading from Google Sheets", error=str(e))
        response = SheetLoadResponse(success=False, error=_describe_sheet_error(e))
        return JSONResponse(status_code=500, content=response.model_dump(mode="json", by_alias=True))

    return SheetLoadResponse(
        success=True,
        workouts=workouts,
        message=f"Loaded {len(workouts)} workouts from Google Sheets",
        debug={
            "totalWorkouts": len(workouts),
            "firstWorkout": workouts[0].model_dump(by_alias=True) if workouts else None,
        },
    )


@router.post("/process-image", response_model=ImageExtractionResponse)
async def process_image(
    image: UploadFile = File(...),
    service: Optional[ImageExtractionService] = Depends(get_extraction_service),
):
    """
    Extract a workout from an uploaded screenshot or photo.

    Nothing is saved; the client confirms the result and submits it
    through /add.
    """
    if image.content_type and not image.content_type.startswith("image/"):
        return ImageExtractionResponse(success=False, error="Please upload an image file")

    if service is None:
        return ImageExtractionResponse(
            success=False,
            error="AI image processing is not configured",
        )

    data = await image.read()
    try:
        workout = await service.extract(data, image.content_type or "image/jpeg")
    except ExtractionError as e:
        logger.error("Error processing image", error=str(e))
        return ImageExtractionResponse(success=False, error=str(e))

    return ImageExtractionResponse(success=True, workoutData=workout)


@router.get("/csv/template", response_class=PlainTextResponse)
async def download_csv_template():
    """Download the CSV template for bulk uploads."""
    return PlainTextResponse(
        CSV_TEMPLATE,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{CSV_TEMPLATE_FILENAME}"'},
    )


@router.post("/csv/preview", response_model=CsvPreviewResponse)
async def preview_csv(
    file: UploadFile = File(...),
):
    """
    Validate a CSV file without saving anything.

    Invalid rows are returned with their errors.
    """
    text = await _read_upload(file)
    try:
        preview = parse_csv(text, strict=settings.CSV_STRICT_VALIDATION)
    except CsvFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CsvPreviewResponse(
        rows=preview.rows,
        total=preview.total,
        valid=preview.valid,
        invalid=preview.invalid,
        message=preview.message,
    )


@router.post("/csv/upload", response_model=CsvUploadResponse)
async def upload_csv(
    file: UploadFile = File(...),
    store: WorkoutStore = Depends(get_workout_store),
):
    """
    Validate a CSV file and append its valid rows one by one.

    Partial success is expected; failed rows are counted, not rolled back.
    """
    text = await _read_upload(file)
    try:
        preview = parse_csv(text, strict=settings.CSV_STRICT_VALIDATION)
    except CsvFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if preview.valid == 0:
        raise HTTPException(status_code=400, detail="No valid workouts to upload")

    result = await upload_rows(store, preview.rows)

    return CsvUploadResponse(
        successCount=result.success_count,
        errorCount=result.error_count,
        invalidCount=preview.invalid,
        failedRows=result.failed_rows,
        message=result.message,
    )


@router.put("/{workout_id}", response_model=MutationResponse)
async def update_workout(
    workout_id: str,
    request: WorkoutUpdate,
    store: WorkoutStore = Depends(get_workout_store),
):
    """
    Update a workout.

    Ids are sheet row numbers; in demo mode the update is simulated.
    """
    if not store.is_configured():
        logger.info("Demo mode: Workout would be updated", workout_id=workout_id)
        return MutationResponse(success=True, message="Demo mode: Workout update simulated")

    try:
        current = await store.get_workout(workout_id)
        if current is None:
            raise HTTPException(status_code=404, detail="Workout not found")
        try:
            updated = request.apply_to(current)
        except ValidationError as e:
            logger.warning("Rejected workout update", workout_id=workout_id, error=str(e))
            raise HTTPException(
                status_code=422,
                detail=[error["msg"] for error in e.errors()],
            )
        await store.update_workout(workout_id, updated)
    except SheetsError as e:
        logger.error("Error updating workout", workout_id=workout_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to update workout")

    return MutationResponse(success=True)


@router.delete("/{workout_id}", response_model=MutationResponse)
async def delete_workout(
    workout_id: str,
    store: WorkoutStore = Depends(get_workout_store),
):
    """
    Delete a workout.

    Ids of later rows shift after a delete; in demo mode the delete is
    simulated.
    """
    if not store.is_configured():
        logger.info("Demo mode: Workout would be deleted", workout_id=workout_id)
        return MutationResponse(success=True, message="Demo mode: Workout deletion simulated")

    try:
        await store.delete_workout(workout_id)
    except SheetsError as e:
        logger.error("Error deleting workout", workout_id=workout_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to delete workout")

    return MutationResponse(success=True)
