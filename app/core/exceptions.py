from typing import Any, Dict, Optional
from fastapi import status

class BaseAPIException(Exception):
    """
    Class cha cho tất cả các lỗi Custom trong hệ thống.
    Giúp chuẩn hóa format lỗi trả về cho Frontend.
    """
    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

# =========================================================
# ROSTER DOMAIN ERRORS
# =========================================================

class RosterException(BaseAPIException):
    """
    Lỗi nghiệp vụ của danh sách học sinh.
    Luôn khôi phục được: danh sách giữ nguyên trạng thái trước đó.
    """


class EmptyRosterException(RosterException):
    """Lỗi 409: Thao tác vô nghĩa khi danh sách rỗng"""
    def __init__(self, message: str = "No students in the list!"):
        super().__init__(
            message=message,
            code="EMPTY_ROSTER",
            status_code=status.HTTP_409_CONFLICT
        )

class InvalidNameException(RosterException):
    """Lỗi 422: Tên rỗng sau khi bỏ khoảng trắng"""
    def __init__(self, message: str = "Please enter a student name!"):
        super().__init__(
            message=message,
            code="INVALID_NAME",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
        )

class InvalidMarksException(RosterException):
    """Lỗi 422: Điểm không phải số nguyên hoặc nằm ngoài [0, 100]"""
    def __init__(self, message: str = "Please enter valid marks (0-100)!", details: dict = None):
        super().__init__(
            message=message,
            code="INVALID_MARKS",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details
        )

class DuplicateNameException(RosterException):
    """Lỗi 409: Tên đã tồn tại (so sánh không phân biệt hoa thường)"""
    def __init__(self, message: str = "A student with this name already exists!", details: dict = None):
        super().__init__(
            message=message,
            code="DUPLICATE_NAME",
            status_code=status.HTTP_409_CONFLICT,
            details=details
        )
