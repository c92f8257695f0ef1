from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class TestResultSubmission(BaseModel):
    """
    Payload de un test terminado, ya validado.

    Solo se construye después de pasar el validador; los alias son las
    claves del body JSON que manda el cliente.
    """

    wpm: int | float
    accuracy: int | float
    error_count: int | float = Field(..., alias="errors")
    time_taken_seconds: int | float = Field(..., alias="timeTaken")
    text_length: int | float = Field(..., alias="textLength")
    user_input_text: str = Field(..., alias="userInput")
    test_type: str = Field(..., alias="testType")  # practice | ai-generated | ...
    difficulty: str
    source_test_id: str = Field(..., alias="testId")

    class Config:
        populate_by_name = True


class TestResult(BaseModel):
    """Resultado crudo de un test (inmutable, solo se inserta)"""

    id: Optional[str] = Field(None, alias="_id")
    user_id: str

    wpm: int | float
    accuracy: int | float
    error_count: int | float
    time_taken_seconds: int | float
    text_length: int | float
    user_input_text: str

    test_type: str
    difficulty: str
    source_test_id: str

    created_at: datetime

    class Config:
        populate_by_name = True


class TestResultResponse(BaseModel):
    id: str
    wpm: int | float
    accuracy: int | float
    error_count: int | float
    time_taken_seconds: int | float
    text_length: int | float
    test_type: str
    difficulty: str
    source_test_id: str
    created_at: datetime
