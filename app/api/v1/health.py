from fastapi import APIRouter

router = APIRouter()

@router.get("/health", summary="Health Check", description="Check that the resume review API is up.")
async def health_check():
    return {"status": "healthy"}
