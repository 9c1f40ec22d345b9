from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse

from app.api.deps import get_notifier, get_roster
from app.schemas.student import (
    AddedResponse,
    AverageResponse,
    CountResponse,
    HighestResponse,
    NotificationResponse,
    RemovedResponse,
    RosterResponse,
    StudentCreate,
)
from app.services.notification.notifier import NotificationSink
from app.services.student.roster import RosterEngine
from app.services.student.table import render_page

router = APIRouter()


def _roster_response(roster: RosterEngine) -> RosterResponse:
    return RosterResponse(students=list(roster.list()), count=roster.count())


def _notification_response(notifier: NotificationSink) -> NotificationResponse:
    notification = notifier.current()
    if notification is None:
        return NotificationResponse(active=False)
    return NotificationResponse(
        active=True,
        message=notification.message,
        kind=notification.kind,
        highlight=notification.highlight,
        expires_in=notifier.remaining(),
    )


@router.get("/", response_model=RosterResponse)
def list_students(roster: RosterEngine = Depends(get_roster)):
    """
    Lấy danh sách học sinh theo thứ tự hiện tại
    """
    return _roster_response(roster)


@router.get("/count", response_model=CountResponse)
def count_students(roster: RosterEngine = Depends(get_roster)):
    return CountResponse(count=roster.count())


@router.get("/highest", response_model=HighestResponse)
def show_highest(
    roster: RosterEngine = Depends(get_roster),
    notifier: NotificationSink = Depends(get_notifier),
):
    """
    Học sinh điểm cao nhất; dòng tương ứng được đánh dấu trong bảng
    """
    index, student = roster.highest_with_index()
    message = f"Highest marks: {student.name} with {student.marks} marks"
    notifier.notify(message, highlight=index)
    return HighestResponse(student=student, index=index, message=message)


@router.get("/average", response_model=AverageResponse)
def show_average(
    roster: RosterEngine = Depends(get_roster),
    notifier: NotificationSink = Depends(get_notifier),
):
    average = roster.average()
    message = f"Class average: {average:.1f} marks"
    notifier.notify(message)
    return AverageResponse(average=average, count=roster.count(), message=message)


@router.post("/sort", response_model=RosterResponse)
def sort_by_marks(
    roster: RosterEngine = Depends(get_roster),
    notifier: NotificationSink = Depends(get_notifier),
):
    """
    Sắp xếp theo điểm từ cao xuống thấp
    """
    roster.sort_descending()
    notifier.notify("Students sorted by marks (highest to lowest)")
    return _roster_response(roster)


@router.post("/reset", response_model=RosterResponse)
def reset_sample(
    roster: RosterEngine = Depends(get_roster),
    notifier: NotificationSink = Depends(get_notifier),
):
    """
    Khôi phục dữ liệu mẫu
    """
    roster.reset()
    notifier.notify("Sample data restored")
    return _roster_response(roster)


@router.delete("/last", response_model=RemovedResponse)
def remove_last(
    roster: RosterEngine = Depends(get_roster),
    notifier: NotificationSink = Depends(get_notifier),
):
    removed = roster.remove_last()
    message = f"Removed {removed.name} from the list"
    notifier.notify(message)
    return RemovedResponse(student=removed, count=roster.count(), message=message)


@router.post("/", response_model=AddedResponse, status_code=status.HTTP_201_CREATED)
def add_student(
    student: StudentCreate,
    roster: RosterEngine = Depends(get_roster),
    notifier: NotificationSink = Depends(get_notifier),
):
    """
    Thêm học sinh mới

    Yêu cầu:
    - **name**: Tên học sinh (bắt buộc, không trùng, không phân biệt hoa thường)
    - **marks**: Điểm, số nguyên từ 0 đến 100
    """
    created = roster.add(student.name, student.marks)
    message = f"Added {created.name} with {created.marks} marks to the list"
    notifier.notify(message)
    return AddedResponse(student=created, count=roster.count(), message=message)


@router.get("/table", response_class=HTMLResponse)
def students_table(
    roster: RosterEngine = Depends(get_roster),
    notifier: NotificationSink = Depends(get_notifier),
):
    """
    Bảng HTML của danh sách, kèm thông báo đang hiển thị (nếu có)
    """
    return HTMLResponse(render_page(roster.list(), notifier.current()))


@router.get("/notification", response_model=NotificationResponse)
def get_notification(notifier: NotificationSink = Depends(get_notifier)):
    return _notification_response(notifier)


@router.delete("/notification", response_model=NotificationResponse)
def dismiss_notification(notifier: NotificationSink = Depends(get_notifier)):
    notifier.dismiss()
    return _notification_response(notifier)
