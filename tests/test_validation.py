import unittest

from timetable_scheduler.models import (
    ConflictType,
    Room,
    ScheduleState,
    StudentGroup,
    Teacher,
)
from timetable_scheduler.validation import find_all_conflicts, is_available, validate_move

from tests.fixtures import entry, full_week, only


class TestValidateMove(unittest.TestCase):
    def setUp(self):
        self.first = entry("e1", day="Monday", slot=0, room="R1", teacher="T1", group="IS01A01-A-1")
        self.second = entry("e2", day="Monday", slot=1, room="R1", teacher="T2", group="IS02B01-B-1")
        self.state = ScheduleState(
            teachers=[Teacher(id="T1", name="Ada", availability=full_week()), Teacher(id="T2", availability=full_week())],
            rooms=[Room(id="R1", name="Room 1", availability=full_week()), Room(id="R2", availability=full_week())],
            student_groups=[
                StudentGroup(id="1-A", year=1, group="A", availability=full_week()),
                StudentGroup(id="2-B", year=2, group="B", availability=full_week()),
            ],
            schedule=[self.first, self.second],
        )

    def test_room_collision_only(self):
        conflicts = validate_move(self.state, self.second, "Monday", 0)
        self.assertEqual([c.type for c in conflicts], [ConflictType.ROOM])
        self.assertIn("Room 1", conflicts[0].message)

    def test_free_cell_is_valid(self):
        self.assertEqual(validate_move(self.state, self.second, "Friday", 9), [])

    def test_entry_does_not_collide_with_itself(self):
        self.assertEqual(validate_move(self.state, self.first, "Monday", 0), [])

    def test_teacher_collision(self):
        moving = entry("e3", day="Tuesday", slot=0, room="R2", teacher="T1", group="IS02B01-B-1")
        conflicts = validate_move(self.state, moving, "Monday", 0)
        self.assertEqual([c.type for c in conflicts], [ConflictType.TEACHER])
        self.assertIn("Ada", conflicts[0].message)

    def test_group_collision_across_courses_and_subgroups(self):
        moving = entry("e3", room="R2", teacher="T2", group="IS01Z99-A-3")
        conflicts = validate_move(self.state, moving, "Monday", 0)
        self.assertEqual([c.type for c in conflicts], [ConflictType.STUDENT_GROUP])
        self.assertIn("1-A", conflicts[0].message)

    def test_unassigned_teachers_never_collide(self):
        state = self.state.model_copy(update={"schedule": [entry("e1", teacher=None)]})
        moving = entry("e3", room="R2", teacher=None, group="IS02B01-B-1")
        self.assertEqual(validate_move(state, moving, "Monday", 0), [])

    def test_placeholder_teachers_never_collide(self):
        state = self.state.model_copy(update={"schedule": [entry("e1", teacher="TBD_IS01A01_A1_theory")]})
        moving = entry("e3", room="R2", teacher="TBD_IS02B01_B1_theory", group="IS02B01-B-1")
        self.assertEqual(validate_move(state, moving, "Monday", 0), [])

    def test_unparsable_year_skips_group_checks(self):
        state = self.state.model_copy(update={"schedule": [entry("e1", group="XXYY01-A-1")]})
        moving = entry("e3", room="R2", teacher="T2", group="XXZZ02-A-1")
        self.assertEqual(validate_move(state, moving, "Monday", 0), [])

    def test_availability_violations(self):
        state = self.state.model_copy(
            update={
                "teachers": [Teacher(id="T2", availability=only(("Monday", 1)))],
                "rooms": [Room(id="R1", availability=only(("Monday", 1)))],
                "student_groups": [StudentGroup(id="2-B", year=2, group="B", availability=only(("Monday", 1)))],
                "schedule": [],
            }
        )
        conflicts = validate_move(state, self.second, "Monday", 2)
        self.assertEqual(
            [c.type for c in conflicts],
            [
                ConflictType.TEACHER_AVAILABILITY,
                ConflictType.ROOM_AVAILABILITY,
                ConflictType.STUDENT_GROUP_AVAILABILITY,
            ],
        )

    def test_undeclared_day_counts_as_available(self):
        self.assertTrue(is_available({}, "Monday", 3))
        self.assertTrue(is_available({"Monday": [False]}, "Monday", 3))
        self.assertFalse(is_available({"Monday": [False]}, "Monday", 0))

    def test_state_is_not_mutated(self):
        before = self.state.model_dump()
        validate_move(self.state, self.second, "Monday", 0)
        self.assertEqual(self.state.model_dump(), before)


class TestFindAllConflicts(unittest.TestCase):
    def setUp(self):
        self.state = ScheduleState(
            teachers=[Teacher(id="T1", name="Ada", availability=full_week())],
            rooms=[Room(id="R1", availability=full_week()), Room(id="R2", availability=full_week())],
            student_groups=[StudentGroup(id="1-A", year=1, group="A", availability=full_week())],
        )

    def test_shared_teacher_gives_one_conflict(self):
        schedule = [
            entry("e1", day="Monday", slot=0, room="R1", teacher="T1", group="IS01A01-A-1"),
            entry("e2", day="Monday", slot=0, room="R2", teacher="T1", group="IS02B01-B-1"),
        ]
        conflicts = find_all_conflicts(self.state.model_copy(update={"schedule": schedule}))
        self.assertEqual(len(conflicts), 1)
        self.assertEqual(conflicts[0].type, ConflictType.TEACHER)
        self.assertEqual(sorted(conflicts[0].entry_ids), ["e1", "e2"])
        self.assertIn("Ada", conflicts[0].message)

    def test_one_conflict_per_type_and_shared_resource(self):
        schedule = [
            entry("e1", room="R1", teacher="T1", group="IS01A01-A-1"),
            entry("e2", room="R1", teacher="T1", group="IS01B01-A-2"),
            entry("e3", room="R1", teacher="T9", group="IS03C01-C-1"),
        ]
        conflicts = find_all_conflicts(self.state.model_copy(update={"schedule": schedule}))
        by_type = {c.type: sorted(c.entry_ids) for c in conflicts}
        self.assertEqual(len(conflicts), 3)
        self.assertEqual(by_type[ConflictType.TEACHER], ["e1", "e2"])
        self.assertEqual(by_type[ConflictType.ROOM], ["e1", "e2", "e3"])
        self.assertEqual(by_type[ConflictType.STUDENT_GROUP], ["e1", "e2"])

    def test_availability_reported_per_entry(self):
        state = self.state.model_copy(
            update={
                "teachers": [Teacher(id="T1", availability=only(("Monday", 0)))],
                "schedule": [entry("e1", day="Monday", slot=0), entry("e2", day="Monday", slot=5, room="R2")],
            }
        )
        conflicts = find_all_conflicts(state)
        self.assertEqual(
            [(c.type, c.entry_ids) for c in conflicts],
            [(ConflictType.TEACHER_AVAILABILITY, ["e2"])],
        )

    def test_unknown_day_is_skipped(self):
        state = self.state.model_copy(
            update={
                "teachers": [Teacher(id="T1", availability={"Saturday": [False] * 16})],
                "schedule": [entry("e1", day="Saturday", slot=0)],
            }
        )
        self.assertEqual(find_all_conflicts(state), [])

    def test_placeholder_teachers_do_not_clash(self):
        schedule = [
            entry("a", room="R1", teacher="TBD_X", group="IS01A01-A-1"),
            entry("b", room="R2", teacher="TBD_X", group="IS02B01-B-1"),
        ]
        self.assertEqual(find_all_conflicts(self.state.model_copy(update={"schedule": schedule})), [])

    def test_unparsable_course_codes_share_a_cell(self):
        schedule = [
            entry("a", room="R1", teacher="T1", group="XXYY01-A-1"),
            entry("b", room="R2", teacher=None, group="XXZZ02-A-1"),
        ]
        self.assertEqual(find_all_conflicts(self.state.model_copy(update={"schedule": schedule})), [])

    def test_clean_schedule(self):
        schedule = [
            entry("e1", day="Monday", slot=0),
            entry("e2", day="Monday", slot=1),
            entry("e3", day="Monday", slot=0, room="R2", teacher=None, group="IS02B01-B-1"),
        ]
        self.assertEqual(find_all_conflicts(self.state.model_copy(update={"schedule": schedule})), [])


if __name__ == "__main__":
    unittest.main()
