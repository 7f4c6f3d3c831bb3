import unittest

from horarios.config import PlannerConfig
from horarios.conflicts import detect_conflicts
from horarios.generator import CombinationGenerator, build_combination, course_priority, generate_combinations
from horarios.model import Course, Day, TimeBlock


def _course(cid, *blocks, credits=0, mandatory=False, priority=None):
    return Course(
        id=cid,
        code=cid,
        credits=credits,
        is_mandatory=mandatory,
        time_blocks=tuple(TimeBlock(day, start, end) for day, start, end in blocks),
        priority=priority,
    )


def _ids(combination):
    return tuple(sorted(c.id for c in combination.courses))


class PriorityTests(unittest.TestCase):
    def test_priority_formula(self):
        elective = _course("E", (Day.MONDAY, 8, 10))
        self.assertEqual(course_priority(elective), 50 + 18)
        two_credits = _course("C", (Day.MONDAY, 8, 10), (Day.TUESDAY, 8, 10), credits=2)
        self.assertEqual(course_priority(two_credits), 50 + 10 + 16)

    def test_priority_is_clamped(self):
        heavy = _course("H", (Day.MONDAY, 8, 10), credits=5, mandatory=True)
        self.assertEqual(course_priority(heavy), 100)

    def test_many_blocks_get_no_bonus(self):
        blocks = [(Day(d % 6), 7 + d, 8 + d) for d in range(12)]
        self.assertEqual(course_priority(_course("M", *blocks)), 50)

    def test_course_without_blocks_gets_no_block_bonus(self):
        self.assertEqual(course_priority(_course("V")), 50)

    def test_candidates_sorted_by_priority_stable(self):
        gen = CombinationGenerator()
        a = _course("A", priority=10)
        b = _course("B", priority=90)
        c = _course("C", priority=10)
        d = _course("D", priority=90)
        self.assertEqual([x.id for x in gen.sort_candidates([a, b, c, d])], ["B", "D", "A", "C"])


class GeneratorTests(unittest.TestCase):
    def test_empty_pool(self):
        self.assertEqual(generate_combinations([]), [])

    def test_zero_limit(self):
        x = _course("X", (Day.MONDAY, 8, 10))
        self.assertEqual(generate_combinations([x], max_combinations=0), [])

    def test_mutually_conflicting_pool(self):
        pool = [_course(cid, (Day.MONDAY, 8, 10), credits=3) for cid in ("A", "B", "C")]
        combos = generate_combinations(pool, max_courses_per_combination=8)
        self.assertEqual(len(combos), 4)
        self.assertEqual({_ids(c) for c in combos}, {(), ("A",), ("B",), ("C",)})
        for comb in combos:
            self.assertLessEqual(len(comb.courses), 1)

    def test_every_combination_is_conflict_free(self):
        pool = [
            _course("A", (Day.MONDAY, 8, 10), (Day.WEDNESDAY, 8, 10), credits=4, mandatory=True),
            _course("B", (Day.MONDAY, 9, 11), credits=3),
            _course("C", (Day.TUESDAY, 14, 16), credits=3, mandatory=True),
            _course("D", (Day.WEDNESDAY, 7, 9), credits=2),
            _course("E", (Day.FRIDAY, 18, 20), credits=2),
            _course("F", (Day.TUESDAY, 15, 17), credits=1),
        ]
        combos = generate_combinations(pool)
        self.assertTrue(combos)
        seen = set()
        for comb in combos:
            self.assertEqual(detect_conflicts(list(comb.courses)), [])
            self.assertEqual(comb.conflicts, ())
            self.assertTrue(comb.is_valid)
            seen.add(_ids(comb))
        self.assertEqual(len(seen), len(combos))

    def test_all_subsets_when_nothing_conflicts(self):
        pool = [_course(f"C{i}", (Day(i), 8, 10)) for i in range(5)]
        self.assertEqual(len(generate_combinations(pool)), 2 ** 5)

    def test_combination_cap(self):
        pool = [_course(f"C{i}", (Day(i), 8, 10)) for i in range(5)]
        self.assertEqual(len(generate_combinations(pool, max_combinations=10)), 10)

    def test_size_cap(self):
        pool = [_course(f"C{i}", (Day(i), 8, 10)) for i in range(5)]
        combos = generate_combinations(pool, max_courses_per_combination=2)
        # 1 vacía + 5 individuales + 10 pares
        self.assertEqual(len(combos), 16)
        self.assertTrue(all(len(c.courses) <= 2 for c in combos))

    def test_exclude_branch_first(self):
        pool = [_course("A", (Day.MONDAY, 8, 10)), _course("B", (Day.TUESDAY, 8, 10))]
        combos = generate_combinations(pool, max_combinations=1)
        self.assertEqual(len(combos), 1)
        self.assertEqual(combos[0].courses, ())

    def test_sorted_by_score_descending(self):
        pool = [
            _course("A", (Day.MONDAY, 8, 10), credits=4, mandatory=True),
            _course("B", (Day.MONDAY, 9, 11), credits=1),
            _course("C", (Day.THURSDAY, 8, 10), credits=3),
        ]
        combos = generate_combinations(pool)
        scores = [c.score for c in combos]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertEqual(_ids(combos[0]), ("A", "C"))

    def test_large_pool_does_not_exhaust_stack(self):
        pool = [_course(f"C{i}", credits=i % 5) for i in range(1500)]
        combos = generate_combinations(pool, max_combinations=5)
        self.assertEqual(len(combos), 5)
        self.assertIn((), [c.courses for c in combos])
        self.assertTrue(all(len(c.courses) <= 8 for c in combos))

    def test_calls_do_not_share_state(self):
        pool = [_course(f"C{i}", (Day(i), 8, 10), credits=i) for i in range(4)]
        gen = CombinationGenerator(PlannerConfig(max_combinations=5))
        first = gen.generate(pool)
        second = gen.generate(pool)
        self.assertEqual(len(first), 5)
        self.assertEqual(first, second)

    def test_config_limits_are_defaults(self):
        pool = [_course(f"C{i}", (Day(i), 8, 10)) for i in range(5)]
        gen = CombinationGenerator(PlannerConfig(max_combinations=3))
        self.assertEqual(len(gen.generate(pool)), 3)
        self.assertEqual(len(gen.generate(pool, max_combinations=7)), 7)


class CombinationTests(unittest.TestCase):
    def test_derived_totals(self):
        a = _course("A", (Day.MONDAY, 8, 10), (Day.WEDNESDAY, 8, 11), credits=4)
        b = _course("B", (Day.TUESDAY, 14, 16), credits=3)
        comb = build_combination([a, b])
        self.assertEqual(comb.total_credits, 7)
        self.assertEqual(comb.total_weekly_hours, 7)
        self.assertEqual(comb.codes, ("A", "B"))

    def test_invalid_subset_keeps_conflicts(self):
        a = _course("A", (Day.MONDAY, 8, 10))
        b = _course("B", (Day.MONDAY, 9, 11))
        comb = build_combination([a, b])
        self.assertEqual(len(comb.conflicts), 1)
        self.assertFalse(comb.is_valid)


if __name__ == "__main__":
    unittest.main()
