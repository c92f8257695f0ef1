"""
Controlador de tests - Textos pre-armados para practicar
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel

from zentype.core.dependencies import Database
from zentype.services.test_content_service import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, TestContentService


router = APIRouter(prefix="/tests", tags=["tests"])


class TestContentResponse(BaseModel):
    """Texto de práctica devuelto por la API."""
    id: str
    text: str
    difficulty: str
    category: str
    source: str
    word_count: int
    time_limit: int
    created_at: Optional[datetime] = None


class Pagination(BaseModel):
    next_cursor: Optional[str] = None
    has_next_page: bool
    limit: int
    count: int


class TestListResponse(BaseModel):
    data: list[TestContentResponse]
    pagination: Pagination


@router.get("", response_model=TestListResponse)
async def list_tests(
    database: Database,
    difficulty: Optional[str] = Query(None, description="Easy, Medium, Hard"),
    time_limit: Optional[int] = Query(None, alias="timeLimit", description="Segundos"),
    category: Optional[str] = Query(None),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    cursor: Optional[str] = Query(None, description="ID del último test de la página anterior")
):
    """
    Listar textos de práctica, paginados por cursor.
    """
    content_service = TestContentService(database.get_db())
    tests, next_cursor = await content_service.list_tests(
        difficulty=difficulty,
        time_limit=time_limit,
        category=category,
        limit=limit,
        cursor=cursor
    )

    return TestListResponse(
        data=[
            TestContentResponse(
                id=t.id,
                text=t.text,
                difficulty=t.difficulty,
                category=t.category,
                source=t.source,
                word_count=t.word_count,
                time_limit=t.time_limit,
                created_at=t.created_at
            )
            for t in tests
        ],
        pagination=Pagination(
            next_cursor=next_cursor,
            has_next_page=next_cursor is not None,
            limit=limit,
            count=len(tests)
        )
    )
