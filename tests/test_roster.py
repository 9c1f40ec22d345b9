"""
Unit tests for the roster engine
"""
import threading
import time

import pytest

from app.core.exceptions import (
    DuplicateNameException,
    EmptyRosterException,
    InvalidMarksException,
    InvalidNameException,
    RosterException,
)
from app.schemas.student import StudentRecord
from app.services.student.roster import SAMPLE_SEED, RosterEngine, parse_marks


def names(records):
    return [record.name for record in records]


def make_roster(*pairs):
    return RosterEngine(seed=tuple(StudentRecord(name=n, marks=m) for n, m in pairs))


class TestInitialState:
    """Roster starts as a copy of the sample seed"""

    def test_starts_with_sample(self, roster):
        assert names(roster.list()) == ["Amit", "Priya", "Rahul", "Sneha", "Karan"]
        assert [r.marks for r in roster.list()] == [85, 92, 76, 88, 95]
        assert roster.count() == 5
        assert len(roster) == 5

    def test_list_is_read_only_view(self, roster):
        view = roster.list()
        assert isinstance(view, tuple)
        roster.remove_last()
        assert len(view) == 5
        assert roster.count() == 4

    def test_independent_rosters(self):
        first = RosterEngine()
        second = RosterEngine()
        first.add("Neha", 70)
        assert first.count() == 6
        assert second.count() == 5


class TestHighest:
    """Test highest()"""

    def test_highest_on_sample(self, roster):
        assert roster.highest() == StudentRecord(name="Karan", marks=95)
        assert roster.highest_with_index() == (4, roster.highest())

    def test_tie_returns_first_in_order(self):
        roster = make_roster(("A", 70), ("B", 90), ("C", 90), ("D", 10))
        assert roster.highest().name == "B"
        assert roster.highest_with_index()[0] == 1

    def test_highest_is_at_least_every_mark(self, roster):
        roster.add("Neha", 100)
        best = roster.highest()
        assert all(best.marks >= r.marks for r in roster.list())

    def test_empty_roster(self):
        roster = make_roster()
        with pytest.raises(EmptyRosterException) as exc_info:
            roster.highest()
        assert exc_info.value.message == "No students to display!"
        assert roster.count() == 0


class TestAverage:
    """Test average() and its rounding policy"""

    def test_average_on_sample(self, roster):
        assert roster.average() == 87.2

    def test_whole_number_average(self):
        assert make_roster(("A", 85), ("B", 95)).average() == 90.0

    def test_half_rounds_up(self):
        # 361 / 4 = 90.25
        roster = make_roster(("A", 90), ("B", 91), ("C", 90), ("D", 90))
        assert roster.average() == 90.3

    def test_small_half_rounds_up(self):
        # 1 / 20 = 0.05
        pairs = [("S0", 1)] + [(f"S{i}", 0) for i in range(1, 20)]
        assert make_roster(*pairs).average() == 0.1

    def test_repeating_quotient(self):
        # 200 / 3 = 66.666...
        assert make_roster(("A", 100), ("B", 100), ("C", 0)).average() == 66.7

    def test_average_matches_sum_over_count(self, roster):
        roster.add("Neha", 71)
        marks = [r.marks for r in roster.list()]
        assert roster.average() == round(sum(marks) / len(marks), 1)

    def test_empty_roster(self):
        roster = make_roster()
        with pytest.raises(EmptyRosterException) as exc_info:
            roster.average()
        assert exc_info.value.message == "No students to calculate average!"


class TestSortDescending:
    """Test sort_descending()"""

    def test_sorts_sample(self, roster):
        result = roster.sort_descending()
        assert names(result) == ["Karan", "Priya", "Sneha", "Amit", "Rahul"]
        assert names(roster.list()) == names(result)

    def test_sort_is_stable(self):
        roster = make_roster(("A", 50), ("B", 80), ("C", 50), ("D", 80), ("E", 50))
        roster.sort_descending()
        assert names(roster.list()) == ["B", "D", "A", "C", "E"]

    def test_result_non_increasing(self, roster):
        roster.add("Neha", 88)
        roster.sort_descending()
        marks = [r.marks for r in roster.list()]
        assert marks == sorted(marks, reverse=True)

    def test_empty_roster(self):
        with pytest.raises(EmptyRosterException) as exc_info:
            make_roster().sort_descending()
        assert exc_info.value.message == "No students to sort!"


class TestReset:
    """Test reset()"""

    def test_reset_after_mutations(self, roster):
        roster.add("Neha", 70)
        roster.sort_descending()
        roster.remove_last()
        assert roster.reset() == SAMPLE_SEED
        assert roster.list() == SAMPLE_SEED

    def test_reset_is_idempotent(self, roster):
        roster.remove_last()
        once = roster.reset()
        twice = roster.reset()
        assert once == twice == SAMPLE_SEED

    def test_reset_from_empty(self):
        roster = RosterEngine()
        while roster.count():
            roster.remove_last()
        roster.reset()
        assert roster.count() == 5

    def test_seed_never_mutated(self, roster):
        roster.sort_descending()
        roster.add("Neha", 70)
        assert names(roster.reset()) == ["Amit", "Priya", "Rahul", "Sneha", "Karan"]
        assert names(SAMPLE_SEED) == ["Amit", "Priya", "Rahul", "Sneha", "Karan"]


class TestRemoveLast:
    """Test remove_last()"""

    def test_removes_last(self, roster):
        removed = roster.remove_last()
        assert removed == StudentRecord(name="Karan", marks=95)
        assert roster.count() == 4

    def test_repeat_until_empty(self, roster):
        expected = list(reversed(roster.list()))
        for record in expected:
            assert roster.remove_last() == record
        with pytest.raises(EmptyRosterException) as exc_info:
            roster.remove_last()
        assert exc_info.value.message == "No students to remove!"
        assert roster.count() == 0


class TestAdd:
    """Test add() validation and mutation"""

    def test_add_on_sample(self, roster):
        created = roster.add("Neha", 70)
        assert created == StudentRecord(name="Neha", marks=70)
        assert roster.count() == 6
        assert roster.list()[-1] == created

    def test_name_is_trimmed(self, roster):
        created = roster.add("  Neha  ", 70)
        assert created.name == "Neha"

    @pytest.mark.parametrize("name", ["", "   ", "\t\n", None])
    def test_blank_name(self, roster, name):
        with pytest.raises(InvalidNameException):
            roster.add(name, 70)
        assert roster.count() == 5

    @pytest.mark.parametrize("marks", [101, -1, 85.5, "abc", "85.5", "", None, True, [85], "1" * 5000])
    def test_invalid_marks(self, roster, marks):
        with pytest.raises(InvalidMarksException) as exc_info:
            roster.add("Neha", marks)
        assert exc_info.value.message == "Please enter valid marks (0-100)!"
        assert roster.count() == 5

    @pytest.mark.parametrize("marks", [0, 100, 70.0, "70", " 70 ", "+70"])
    def test_accepted_marks(self, roster, marks):
        created = roster.add("Neha", marks)
        assert isinstance(created.marks, int)

    @pytest.mark.parametrize("name", ["amit", "AMIT", " Amit ", "aMiT"])
    def test_duplicate_name(self, roster, name):
        with pytest.raises(DuplicateNameException):
            roster.add(name, 50)
        assert roster.count() == 5

    def test_name_checked_before_marks(self, roster):
        with pytest.raises(InvalidNameException):
            roster.add("", 500)

    def test_marks_checked_before_duplicate(self, roster):
        with pytest.raises(InvalidMarksException):
            roster.add("Amit", 500)

    def test_errors_share_base(self, roster):
        with pytest.raises(RosterException):
            roster.add("Amit", 50)

    def test_name_free_after_removal(self, roster):
        roster.remove_last()
        assert roster.add("karan", 60).name == "karan"


class TestParseMarks:
    """Test parse_marks()"""

    def test_bounds(self):
        assert parse_marks(0) == 0
        assert parse_marks(100) == 100

    def test_out_of_range_details(self):
        with pytest.raises(InvalidMarksException) as exc_info:
            parse_marks("150")
        assert exc_info.value.details == {"marks": 150}


class TestConcurrentAccess:
    """Handlers share one engine across threadpool workers"""

    def test_same_name_added_once(self, roster, monkeypatch):
        original = RosterEngine.contains_name

        def slow_contains_name(self, name):
            found = original(self, name)
            time.sleep(0.05)
            return found

        monkeypatch.setattr(RosterEngine, "contains_name", slow_contains_name)

        errors = []

        def worker():
            try:
                roster.add("Neha", 70)
            except DuplicateNameException as exc:
                errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert names(roster.list()).count("Neha") == 1
        assert len(errors) == 1
        assert roster.count() == 6

    def test_concurrent_removals_never_double_pop(self, roster):
        removed = []
        failures = []

        def worker():
            try:
                removed.append(roster.remove_last())
            except EmptyRosterException as exc:
                failures.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(removed) == 5
        assert len(failures) == 3
        assert roster.count() == 0
