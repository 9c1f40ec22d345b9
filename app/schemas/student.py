from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class StudentRecord(BaseModel):
    name: str
    marks: int = Field(..., ge=0, le=100)

    model_config = ConfigDict(frozen=True)


class StudentCreate(BaseModel):
    # marks giữ kiểu "lỏng": RosterEngine tự kiểm tra và báo INVALID_MARKS
    name: str = ""
    marks: Optional[Union[bool, int, float, str]] = None


class RosterResponse(BaseModel):
    students: List[StudentRecord]
    count: int


class CountResponse(BaseModel):
    count: int


class HighestResponse(BaseModel):
    student: StudentRecord
    index: int
    message: str


class AverageResponse(BaseModel):
    average: float
    count: int
    message: str


class AddedResponse(BaseModel):
    student: StudentRecord
    count: int
    message: str


class RemovedResponse(BaseModel):
    student: StudentRecord
    count: int
    message: str


class NotificationResponse(BaseModel):
    active: bool
    message: Optional[str] = None
    kind: Optional[Literal["success", "error"]] = None
    highlight: Optional[int] = None
    expires_in: Optional[float] = None
