"""
Controlador de resultados - Envío de tests terminados e historial
"""

from typing import Any

from fastapi import APIRouter, Body, Query, Request
from pydantic import BaseModel

from zentype.core.correlation import get_correlation_id
from zentype.core.dependencies import BearerCredentials, CurrentIdentity, Database, Submissions, resolve_identity
from zentype.models.test_result import TestResultResponse
from zentype.repositories.test_result_repository import TestResultRepository
from zentype.services.validation_service import validate_submission


router = APIRouter(tags=["test-results"])


class SubmissionResponse(BaseModel):
    """Respuesta de un envío exitoso."""
    success: bool = True
    message: str
    testResultId: str
    correlationId: str


@router.post("/submit-test-result", response_model=SubmissionResponse)
async def submit_test_result(
    request: Request,
    credentials: BearerCredentials,
    submissions: Submissions,
    payload: dict[str, Any] = Body(...)
):
    """
    Guardar el resultado de un test terminado.

    Primero se valida el body (devuelve todos los errores juntos), después
    se verifica el token y recién ahí se escribe todo en una transacción:
    resultado, stats del perfil y leaderboards.
    """
    submission = validate_submission(payload)
    identity = resolve_identity(credentials)

    result = await submissions.submit(identity.user_id, submission)

    return SubmissionResponse(
        message="Test result saved successfully",
        testResultId=result.test_result_id,
        correlationId=get_correlation_id(request)
    )


@router.get("/test-results/me", response_model=list[TestResultResponse])
async def get_my_test_results(
    identity: CurrentIdentity,
    database: Database,
    limit: int = Query(20, ge=1, le=100, description="Maximum number of results to return")
):
    """
    Historial de tests del usuario actual, del más nuevo al más viejo.
    """
    result_repo = TestResultRepository(database.get_db())
    results = await result_repo.get_user_results(identity.user_id, limit)

    return [
        TestResultResponse(
            id=r.id,
            wpm=r.wpm,
            accuracy=r.accuracy,
            error_count=r.error_count,
            time_taken_seconds=r.time_taken_seconds,
            text_length=r.text_length,
            test_type=r.test_type,
            difficulty=r.difficulty,
            source_test_id=r.source_test_id,
            created_at=r.created_at
        )
        for r in results
    ]
