from __future__ import annotations

import importlib.util
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for recycling tests")
class RecycleTests(unittest.TestCase):
    def test_length_laws_accept_compatible_lengths(self) -> None:
        from pmapper import recycle

        cases = {
            "zero": ([[]], 0),
            "one": ([[1]], 1),
            "n": ([[1, 2, 3]], 3),
            "one_and_n": ([[1], [1, 2, 3]], 3),
            "n_and_n": ([[1, 2, 3], [4, 5, 6]], 3),
        }
        for label, (inputs, expected) in cases.items():
            with self.subTest(label=label):
                out = recycle(inputs)
                self.assertEqual([len(seq) for seq in out], [expected] * len(inputs))

    def test_length_law_rejects_two_different_long_lengths(self) -> None:
        from pmapper import LengthMismatchError, recycle

        with self.assertRaises(LengthMismatchError) as ctx:
            recycle([[1], [1, 2, 3], [1, 2]])
        err = ctx.exception
        self.assertEqual(err.position, 2)
        self.assertEqual(err.length, 2)
        self.assertEqual(err.expected, 3)
        self.assertIsNone(err.name)
        self.assertIn("position 2", str(err))
        self.assertIsInstance(err, ValueError)

    def test_length_mismatch_uses_field_name_when_available(self) -> None:
        from pmapper import LengthMismatchError, recycle

        with self.assertRaises(LengthMismatchError) as ctx:
            recycle([[1, 2, 3], [1, 2]], fields=("a", "b"))
        self.assertEqual(ctx.exception.name, "b")
        self.assertEqual(str(ctx.exception), "Input `b` must have length 1 or 3, not 2")

    def test_length_one_inputs_are_replicated(self) -> None:
        from pmapper import recycle

        x, y = recycle([[1, 2, 3], [10]])
        self.assertEqual(x.values, (1, 2, 3))
        self.assertEqual(y.values, (10, 10, 10))

    def test_any_empty_input_empties_everything(self) -> None:
        from pmapper import recycle

        out = recycle([[], [1], [1, 2, 3]])
        self.assertEqual([seq.values for seq in out], [(), (), ()])

    def test_empty_input_does_not_hide_long_length_mismatch(self) -> None:
        from pmapper import LengthMismatchError, recycle

        with self.assertRaises(LengthMismatchError):
            recycle([[], [1, 2], [1, 2, 3]])

    def test_no_inputs_means_length_zero(self) -> None:
        from pmapper import common_length, recycle, transpose

        self.assertEqual(common_length([]), 0)
        self.assertEqual(recycle([]), [])
        self.assertEqual(transpose([]), [])

    def test_scalars_and_none_are_normalised(self) -> None:
        from pmapper import recycle

        x, y = recycle(["abc", [1, 2]])
        self.assertEqual(x.values, ("abc", "abc"))
        self.assertEqual(recycle([None, [1, 2]])[1].values, ())


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for transpose tests")
class TransposeTests(unittest.TestCase):
    def test_tuples_follow_positions_and_input_order(self) -> None:
        from pmapper import transpose

        tuples = transpose([[1, 2], ["a", "b"], [True, False]])
        self.assertEqual([tup.values for tup in tuples], [(1, "a", True), (2, "b", False)])
        self.assertTrue(all(tup.name is None and tup.fields is None for tup in tuples))

    def test_fields_are_shared_by_every_tuple(self) -> None:
        from pmapper import transpose

        tuples = transpose([[1, 2], [3, 4]], fields=("a", "b"))
        self.assertEqual(tuples[0].fields, ("a", "b"))
        self.assertIs(tuples[0].fields, tuples[1].fields)

    def test_empty_field_names_count_as_unnamed(self) -> None:
        from pmapper import transpose

        tuples = transpose([[1], [2]], fields=("", None))
        self.assertIsNone(tuples[0].fields)
        partial = transpose([[1], [2]], fields=("a", ""))
        self.assertEqual(partial[0].fields, ("a", None))

    def test_first_named_sequence_wins(self) -> None:
        from pmapper import transpose

        tuples = transpose([{"a": 1, "b": 2}, {"c": 3, "d": 4}])
        self.assertEqual([tup.name for tup in tuples], ["a", "b"])

        later = transpose([[1, 2], {"c": 3, "d": 4}, {"e": 5, "f": 6}])
        self.assertEqual([tup.name for tup in later], ["c", "d"])

    def test_recycled_scalar_name_does_not_name_tuples(self) -> None:
        from pmapper import recycle, transpose

        tuples = transpose(recycle([{"k": 1}, [1, 2, 3]]))
        self.assertEqual([tup.name for tup in tuples], [None, None, None])

        single = transpose(recycle([{"k": 1}]))
        self.assertEqual(single[0].name, "k")

    def test_unequal_lengths_are_rejected(self) -> None:
        from pmapper import transpose

        with self.assertRaises(ValueError):
            transpose([[1, 2], [1]])
        with self.assertRaises(ValueError):
            transpose([[1], [2]], fields=("a",))


if __name__ == "__main__":
    unittest.main()
