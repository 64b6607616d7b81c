"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.schemas import EnergyReadingDocument, SeedSummary
from datastore.document_store import EnergyDocumentCollection, build_default_collection
from errors import InvalidCategoryError, InvalidMonthError, SeederError
from models.records import EnergyCategory, month_index
from services.aggregator import Aggregator

router = APIRouter()


def get_collection() -> EnergyDocumentCollection:
    collection = build_default_collection()
    try:
        collection.connect()
    except SeederError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    return collection


def get_aggregator() -> Aggregator:
    return Aggregator()


def _load_documents(
    collection: EnergyDocumentCollection, year: Optional[int]
) -> list[EnergyReadingDocument]:
    try:
        documents = collection.scan()
    except SeederError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    if year is None:
        return documents
    return [document for document in documents if document.year == year]


@router.get(
    "/energy",
    response_model=List[EnergyReadingDocument],
    summary="List stored energy readings, optionally filtered.",
)
async def list_readings(
    year: Optional[int] = Query(None),
    month: Optional[str] = Query(None, description="Calendar month name, e.g. July."),
    floor: Optional[int] = Query(None, ge=1, le=5),
    category: Optional[str] = Query(None),
    exceeded: Optional[bool] = Query(None),
    collection: EnergyDocumentCollection = Depends(get_collection),
) -> list[EnergyReadingDocument]:
    try:
        if month is not None:
            month_index(month)
        parsed_category = EnergyCategory.parse(category) if category is not None else None
    except (InvalidCategoryError, InvalidMonthError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    documents = _load_documents(collection, year)
    return [
        document
        for document in documents
        if (month is None or document.month == month)
        and (floor is None or document.floor == floor)
        and (parsed_category is None or document.category == parsed_category)
        and (exceeded is None or document.is_exceeded == exceeded)
    ]


@router.get(
    "/energy/summary",
    response_model=SeedSummary,
    summary="Per-category counts and averages over stored readings.",
)
async def get_summary(
    year: Optional[int] = Query(None),
    collection: EnergyDocumentCollection = Depends(get_collection),
    aggregator: Aggregator = Depends(get_aggregator),
) -> SeedSummary:
    documents = _load_documents(collection, year)
    return aggregator.summarize(document.to_reading() for document in documents)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
