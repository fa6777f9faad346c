#!/usr/bin/env python3
"""
Unit tests for nudge/check.py
"""

import os
import unittest
from dataclasses import dataclass, field
from unittest.mock import patch

from nudge import mutators as m
from nudge.check import (
    PROPERTY_FALSE_MESSAGE,
    PROPERTY_RAISED_MESSAGE,
    Check,
    CheckEmptyCorpus,
    CheckFailed,
    CheckMutatorError,
    CheckPassed,
)
from nudge.errors import MutatorContractError, MutatorError


def less_than_ten(x):
    if x >= 10:
        return f"expected {x} < 10"


@dataclass
class Frame:
    payload: int
    checksum: int = field(metadata={"nudge": "ignore"})


def increment_nonzero(c, place):
    if place.value != 0:
        c.mutation(lambda _ctx: place.set(place.value + 1))


class TestCheckOutcomes(unittest.TestCase):
    """Test the result of Check.run for each kind of outcome."""

    def test_passing_property(self):
        check = Check(iters=50, seed=1)
        result = check.run(m.u8(), [0, 1], lambda x: 0 <= x <= 255)
        self.assertIsInstance(result, CheckPassed)
        self.assertTrue(result.ok)
        self.assertEqual(check.last_stats.iterations, 50)
        self.assertEqual(check.last_stats.status, "PASSED")

    def test_empty_corpus(self):
        result = Check().run(m.u8(), [], lambda x: False)
        self.assertIsInstance(result, CheckEmptyCorpus)
        self.assertEqual(result.status, "EMPTY_CORPUS")
        self.assertFalse(result.ok)

    def test_shrinks_to_the_boundary(self):
        """A failing byte shrinks to the smallest value that still fails."""
        with self.assertLogs("nudge.check", level="WARNING"):
            result = Check(shrink_iters=1000, seed=0).run(m.u8(), [255], less_than_ten)
        failure = result.unwrap_failed()
        self.assertEqual(failure.value, 10)
        self.assertEqual(failure.message, "expected 10 < 10")
        self.assertEqual(str(failure), "failed on input 10: expected 10 < 10")

    def test_raising_property_uses_placeholder_message(self):
        def raises(x):
            if x >= 10:
                raise ValueError("too big")

        failure = Check(seed=0).run(m.u8(), [255], raises).unwrap_failed()
        self.assertEqual(failure.value, 10)
        self.assertEqual(failure.message, PROPERTY_RAISED_MESSAGE)

    def test_false_property_uses_generic_message(self):
        failure = Check(seed=0).run(m.u8(), [200], lambda x: x < 10).unwrap_failed()
        self.assertEqual(failure.message, PROPERTY_FALSE_MESSAGE)

    def test_failure_found_by_mutation(self):
        """The only failing input is reachable by one mutation of the corpus."""

        def expected_true(b):
            if not b:
                return "expected true!"

        failure = Check(seed=3).run(m.bool_(), [True], expected_true).unwrap_failed()
        self.assertIs(failure.value, False)
        self.assertEqual(failure.message, "expected true!")

    def test_shrunk_value_still_fails(self):
        def small_sum(xs):
            if sum(xs) > 100:
                return "sum too large"

        failure = Check(seed=4).run(m.array(m.u8()), [[0, 0, 0]], small_sum).unwrap_failed()
        self.assertGreater(sum(failure.value), 100)

    def test_exhausted_corpus_passes(self):
        """Members with nothing left to mutate are dropped; an empty corpus passes."""
        calls = []
        check = Check(seed=0)
        result = check.run(m.unit(), [()], calls.append)
        self.assertIsInstance(result, CheckPassed)
        self.assertEqual(len(calls), 1)
        self.assertEqual(check.last_stats.exhausted_removed, 1)

    def test_mutation_continues_after_a_member_is_exhausted(self):
        """The remaining members keep being mutated once one is dropped."""
        seen = []
        check = Check(iters=50, seed=0)
        result = check.run(m.from_fn(increment_nonzero), [0, 5], seen.append)
        self.assertIsInstance(result, CheckPassed)
        self.assertEqual(check.last_stats.exhausted_removed, 1)
        self.assertEqual(check.last_stats.iterations, 50)
        self.assertEqual(check.last_stats.mutations, 49)
        self.assertEqual(seen[-1], 5 + 49)

    def test_mutator_error(self):
        result = Check(seed=0).run(m.tuple_(m.u8()), [(1, 2)], lambda t: None)
        self.assertIsInstance(result, CheckMutatorError)
        self.assertIsInstance(result.unwrap_mutator_error(), MutatorError)
        with self.assertRaises(ValueError):
            result.unwrap_failed()

    def test_ungeneratable_field_is_a_mutator_error(self):
        """A required field with no mutator is reported, not raised."""
        check = Check(seed=0, iters=20)
        result = check.run(m.option(m.derive(Frame)), [None], lambda v: None)
        self.assertIsInstance(result, CheckMutatorError)
        error = result.unwrap_mutator_error()
        self.assertIsInstance(error, MutatorError)
        self.assertIn("checksum", error.message)

    def test_unwrap_on_the_wrong_outcome(self):
        with self.assertRaises(ValueError):
            CheckPassed().unwrap_mutator_error()
        with self.assertRaises(ValueError):
            CheckEmptyCorpus().unwrap_failed()

    def test_contract_violation_propagates(self):
        def swallowing(c, place):
            try:
                c.mutation(lambda _ctx: place.set(1))
            except Exception:
                pass

        with self.assertRaises(MutatorContractError):
            Check(seed=0).run(m.from_fn(swallowing), [0], lambda x: None)

    def test_caller_corpus_is_not_modified(self):
        corpus = [[1, 2, 3]]
        Check(iters=100, seed=0).run(m.array(m.u8()), corpus, lambda xs: None)
        self.assertEqual(corpus, [[1, 2, 3]])

    def test_same_seed_same_failure(self):
        def small(x):
            if x > 1000:
                return "too large"

        first = Check(seed=9).run(m.i32(), [0], small)
        second = Check(seed=9).run(m.i32(), [0], small)
        self.assertEqual(first, second)

    def test_run_with_defaults(self):
        failure = Check(seed=0).run_with_defaults(
            bool, lambda b: "was true" if b else None
        ).unwrap_failed()
        self.assertIs(failure.value, True)


class TestCheckShrinking(unittest.TestCase):
    """Test the shrinking phase."""

    def test_no_shrinking(self):
        check = Check(shrink_iters=0, seed=0)
        failure = check.run(m.u8(), [255], less_than_ten).unwrap_failed()
        self.assertEqual(failure.value, 255)
        self.assertEqual(check.last_stats.shrink_attempts, 0)

    def test_mutator_errors_are_ignored_while_shrinking(self):
        def set_to_99(c, place):
            if c.shrink:
                raise MutatorError("cannot shrink")
            c.mutation(lambda _ctx: place.set(99))

        check = Check(shrink_iters=5, seed=0)
        result = check.run(m.from_fn(set_to_99), [0], lambda x: x != 99)
        failure = result.unwrap_failed()
        self.assertEqual(failure.value, 99)
        self.assertEqual(check.last_stats.shrink_errors, 5)
        self.assertEqual(check.last_stats.status, "FAILED")

    def test_shrinking_stops_when_exhausted(self):
        check = Check(shrink_iters=1000, seed=0)
        failure = check.run(m.bool_(), [True], lambda b: False).unwrap_failed()
        self.assertIs(failure.value, False)
        self.assertEqual(check.last_stats.shrink_attempts, 2)
        self.assertEqual(check.last_stats.shrink_accepted, 1)


class TestCheckConfiguration(unittest.TestCase):
    def test_defaults(self):
        check = Check()
        self.assertEqual((check.iters, check.shrink_iters, check.seed), (1000, 1000, None))

    def test_builders_chain(self):
        check = Check().with_iters(5).with_shrink_iters(6).with_seed(7)
        self.assertEqual((check.iters, check.shrink_iters, check.seed), (5, 6, 7))

    def test_from_env(self):
        env = {"NUDGE_ITERS": "0x10", "NUDGE_SHRINK_ITERS": "5", "NUDGE_SEED": "42"}
        with patch.dict(os.environ, env):
            check = Check.from_env()
        self.assertEqual((check.iters, check.shrink_iters, check.seed), (16, 5, 42))

    def test_from_env_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            check = Check.from_env()
        self.assertEqual((check.iters, check.shrink_iters, check.seed), (1000, 1000, None))

    def test_from_env_rejects_garbage(self):
        with patch.dict(os.environ, {"NUDGE_ITERS": "lots"}):
            with self.assertRaises(ValueError):
                Check.from_env()


if __name__ == "__main__":
    unittest.main()
