#!/usr/bin/env python3
"""
Unit tests for nudge/candidates.py
"""

import unittest
from unittest.mock import patch

from nudge import mutators as m
from nudge.candidates import Candidates, Context, Phase, count_candidates, mutate_once
from nudge.errors import EarlyExit, Exhausted, InvalidRange, MutatorContractError, MutatorError
from nudge.places import Box
from nudge.rng import Rng
from nudge.types import Ok


def register(n, record):
    """Return a mutate function registering `n` closures that log their index."""

    def mutate(c):
        for i in range(n):
            c.mutation(lambda _ctx, i=i: record.append(i))

    return mutate


class TestCandidatesRegistry(unittest.TestCase):
    """Test the registry's behavior in each phase."""

    def test_counting_phase_only_counts(self):
        """Registrations during counting never invoke their closures."""
        record = []
        c = Candidates(Context(Rng(0)))
        self.assertIs(c.phase, Phase.COUNTING)
        register(4, record)(c)
        self.assertEqual(c.count, 4)
        self.assertEqual(record, [])

    def test_applying_phase_runs_target_and_exits(self):
        """The target registration runs and EarlyExit is raised right after."""
        record = []
        c = Candidates(Context(Rng(0)))
        c.begin_applying(2)
        with self.assertRaises(EarlyExit):
            register(5, record)(c)
        self.assertEqual(record, [2])
        self.assertTrue(c.applied)

    def test_shrink_flag_comes_from_context(self):
        self.assertTrue(Candidates(Context(Rng(0), shrink=True)).shrink)
        self.assertFalse(Candidates(Context(Rng(0))).shrink)


class TestMutateOnce(unittest.TestCase):
    """Test the two-pass selection driver."""

    def test_applies_exactly_one_candidate(self):
        record = []
        mutate_once(Context(Rng(3)), register(10, record))
        self.assertEqual(len(record), 1)
        self.assertIn(record[0], range(10))

    def test_every_candidate_is_reachable(self):
        """Repeated mutations eventually select every registration."""
        record = []
        context = Context(Rng(11))
        for _ in range(300):
            mutate_once(context, register(3, record))
        self.assertEqual(set(record), {0, 1, 2})

    def test_zero_candidates_is_exhausted_without_drawing(self):
        """Exhaustion is reported before any random draw happens."""
        context = Context(Rng(0))
        with patch.object(context.rng, "index") as mock_index:
            with self.assertRaises(Exhausted):
                mutate_once(context, register(0, []))
        mock_index.assert_not_called()

    def test_error_during_counting_propagates(self):
        def mutate(c):
            raise InvalidRange(3, 1)

        with self.assertRaises(InvalidRange):
            mutate_once(Context(Rng(0)), mutate)

    def test_error_from_closure_propagates(self):
        def fail(_ctx):
            raise MutatorError("closure failed")

        def mutate(c):
            c.mutation(fail)

        with self.assertRaises(MutatorError) as cm:
            mutate_once(Context(Rng(0)), mutate)
        self.assertEqual(cm.exception.message, "closure failed")

    def test_same_seed_same_choice(self):
        """Selection depends only on the seed and the call sequence."""
        first, second = [], []
        for record in (first, second):
            context = Context(Rng(99))
            for _ in range(20):
                mutate_once(context, register(7, record))
        self.assertEqual(first, second)

    def test_counting_is_repeatable(self):
        """Two counting passes over the same value agree."""
        mutator = m.tuple_(m.option(m.u8()), m.char(), m.result(m.bool_(), m.f64()))
        context = Context(Rng(0))
        box = Box((3, "q", Ok(True)))
        first = count_candidates(context, lambda c: mutator.mutate(c, box))
        second = count_candidates(context, lambda c: mutator.mutate(c, box))
        self.assertEqual(first, second)
        self.assertEqual(first, 2 + 51 + 2)

    def test_count_candidates_does_not_apply(self):
        record = []
        self.assertEqual(count_candidates(Context(Rng(0)), register(6, record)), 6)
        self.assertEqual(record, [])


class TestContractViolations(unittest.TestCase):
    """Test that misbehaving mutators are reported loudly."""

    def test_swallowed_early_exit_is_detected(self):
        """A mutator catching broad exceptions breaks the protocol."""

        def swallowing(c, place):
            try:
                c.mutation(lambda _ctx: place.set(1))
            except Exception:
                pass

        box = Box(0)
        with self.assertRaises(MutatorContractError) as cm:
            mutate_once(Context(Rng(0)), lambda c: m.from_fn(swallowing).mutate(c, box))
        self.assertIn("early-exit", str(cm.exception))

    def test_nondeterministic_enumeration_is_detected(self):
        """Registering fewer candidates while applying than while counting fails."""
        calls = []

        def flaky(c, place):
            calls.append(None)
            if len(calls) == 1:
                for _ in range(3):
                    c.mutation(lambda _ctx: place.set(1))

        box = Box(0)
        with self.assertRaises(MutatorContractError) as cm:
            mutate_once(Context(Rng(0)), lambda c: m.from_fn(flaky).mutate(c, box))
        self.assertIn("registered 3", str(cm.exception))
        self.assertEqual(box.value, 0)

    def test_contract_error_is_not_a_mutation_error(self):
        """Contract violations are assertion failures, not recoverable errors."""
        self.assertTrue(issubclass(MutatorContractError, AssertionError))


if __name__ == "__main__":
    unittest.main()
