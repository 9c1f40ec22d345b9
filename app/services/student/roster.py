import logging
import re
import threading
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Tuple

from app.core.exceptions import (
    DuplicateNameException,
    EmptyRosterException,
    InvalidMarksException,
    InvalidNameException,
)
from app.schemas.student import StudentRecord

logger = logging.getLogger(__name__)

MIN_MARKS = 0
MAX_MARKS = 100

SAMPLE_SEED: Tuple[StudentRecord, ...] = (
    StudentRecord(name="Amit", marks=85),
    StudentRecord(name="Priya", marks=92),
    StudentRecord(name="Rahul", marks=76),
    StudentRecord(name="Sneha", marks=88),
    StudentRecord(name="Karan", marks=95),
)

_INTEGER_RE = re.compile(r"[+-]?\d+")
_ONE_DECIMAL = Decimal("0.1")

def parse_marks(value: Any) -> int:
    """
    Convert a candidate marks value to an int in [0, 100].

    Accepts ints, integral floats and decimal integer strings (form input
    arrives as text). Raises InvalidMarksException for anything else.
    """
    if isinstance(value, bool):
        raise InvalidMarksException(details={"marks": repr(value)})

    if isinstance(value, int):
        marks = value
    elif isinstance(value, float) and value.is_integer():
        marks = int(value)
    elif isinstance(value, str) and _INTEGER_RE.fullmatch(value.strip()):
        try:
            marks = int(value.strip())
        except ValueError:
            # int() refuses digit strings longer than sys.get_int_max_str_digits()
            raise InvalidMarksException(details={"marks": f"{value.strip()[:20]}..."}) from None
    else:
        raise InvalidMarksException(details={"marks": repr(value)})

    if not MIN_MARKS <= marks <= MAX_MARKS:
        raise InvalidMarksException(details={"marks": marks})
    return marks


class RosterEngine:
    """
    In-memory list of student records.

    Every public operation either moves the roster from one valid state to
    another or raises a RosterException leaving it untouched. The engine never
    talks to presentation or notification code; callers report the outcome.

    Sync FastAPI handlers run in a threadpool, so operations are serialised
    with a re-entrant lock.
    """

    def __init__(self, seed: Tuple[StudentRecord, ...] = SAMPLE_SEED) -> None:
        self._lock = threading.RLock()
        self._seed = tuple(seed)
        self._students: List[StudentRecord] = self._copy_seed()

    def _copy_seed(self) -> List[StudentRecord]:
        return [record.model_copy() for record in self._seed]

    def __len__(self) -> int:
        return self.count()

    def list(self) -> Tuple[StudentRecord, ...]:
        """Lấy danh sách học sinh hiện tại (chỉ đọc)"""
        with self._lock:
            return tuple(self._students)

    def count(self) -> int:
        with self._lock:
            return len(self._students)

    def highest_with_index(self) -> Tuple[int, StudentRecord]:
        """Vị trí và học sinh điểm cao nhất (lấy người đầu tiên nếu bằng điểm)"""
        with self._lock:
            if not self._students:
                raise EmptyRosterException("No students to display!")

            best = 0
            for index, record in enumerate(self._students):
                if record.marks > self._students[best].marks:
                    best = index
            return best, self._students[best]

    def highest(self) -> StudentRecord:
        """Học sinh có điểm cao nhất"""
        return self.highest_with_index()[1]

    def average(self) -> float:
        """Điểm trung bình, làm tròn 1 chữ số thập phân (ROUND_HALF_UP)"""
        with self._lock:
            if not self._students:
                raise EmptyRosterException("No students to calculate average!")

            total = Decimal(sum(record.marks for record in self._students))
            mean = total / Decimal(len(self._students))
        return float(mean.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))

    def sort_descending(self) -> Tuple[StudentRecord, ...]:
        """Sắp xếp theo điểm giảm dần, giữ thứ tự cũ khi bằng điểm"""
        with self._lock:
            if not self._students:
                raise EmptyRosterException("No students to sort!")

            self._students.sort(key=lambda record: record.marks, reverse=True)
            logger.info(f"Roster sorted by marks ({len(self._students)} students)")
            return tuple(self._students)

    def reset(self) -> Tuple[StudentRecord, ...]:
        """Khôi phục dữ liệu mẫu"""
        with self._lock:
            self._students = self._copy_seed()
            logger.info("Roster reset to sample data")
            return tuple(self._students)

    def remove_last(self) -> StudentRecord:
        """Xóa học sinh cuối danh sách"""
        with self._lock:
            if not self._students:
                raise EmptyRosterException("No students to remove!")

            removed = self._students.pop()
        logger.info(f"Removed student '{removed.name}'")
        return removed

    def contains_name(self, name: str) -> bool:
        key = name.strip().casefold()
        with self._lock:
            return any(record.name.casefold() == key for record in self._students)

    def add(self, name: Any, marks: Any) -> StudentRecord:
        """Thêm học sinh mới vào cuối danh sách"""
        clean_name = name.strip() if isinstance(name, str) else ""
        if not clean_name:
            raise InvalidNameException()

        clean_marks = parse_marks(marks)

        # Kiểm tra trùng tên và thêm phải nằm trong cùng một lần giữ khóa
        with self._lock:
            if self.contains_name(clean_name):
                raise DuplicateNameException(details={"name": clean_name})

            record = StudentRecord(name=clean_name, marks=clean_marks)
            self._students.append(record)
        logger.info(f"Added student '{record.name}' with {record.marks} marks")
        return record
