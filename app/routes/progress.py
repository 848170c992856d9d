from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.progress import MessageResponse, ProgressOut, SaveProgressRequest
from app.services import progress_service
from app.services.progress_service import SaveOutcome

router = APIRouter(tags=["progress"])


@router.post(
    "/save",
    response_model=MessageResponse,
    responses={201: {"model": MessageResponse}},
)
async def save_reviews(
    review_data: SaveProgressRequest,
    db: AsyncSession = Depends(get_db)
):
    """Create or replace the caller's review progress"""
    outcome = await progress_service.save_progress(
        db,
        review_data.username,
        review_data.reviews,
        review_data.last_reviewed_index
    )

    if outcome is SaveOutcome.CREATED:
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content={"message": "New review record created."},
            headers={"Location": f"/reviews/{review_data.username}"},
        )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"message": "Reviews updated successfully."},
    )


@router.get("/reviews/{username}", response_model=ProgressOut)
async def get_reviews(username: str, db: AsyncSession = Depends(get_db)):
    """Stored progress for a user, 404 if nothing was saved yet"""
    return await progress_service.fetch_progress(db, username)
