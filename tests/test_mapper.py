from __future__ import annotations

import importlib.util
import operator
import unittest
from types import SimpleNamespace


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for function adapter tests")
class AdaptTests(unittest.TestCase):
    def test_function_values_are_used_unmodified(self) -> None:
        from pmapper import InvocableKind, adapt

        def add(a, b):
            return a + b

        inv = adapt(add)
        self.assertIs(inv.kind, InvocableKind.FUNCTION_VALUE)
        self.assertIs(inv.target, add)
        self.assertEqual(list(inv.signature.parameters), ["a", "b"])
        self.assertEqual(inv(1, 2), 3)

    def test_builtins_without_signature_are_accepted(self) -> None:
        from pmapper import adapt

        inv = adapt(min)
        self.assertIsNone(inv.signature)
        self.assertEqual(inv(3, 1, 2), 1)

    def test_fixed_extras_are_appended(self) -> None:
        from pmapper import adapt

        def describe(x, sep, *, suffix=""):
            return f"{x}{sep}{suffix}"

        inv = adapt(describe, "-", suffix="!")
        self.assertEqual(inv(1), "1-!")
        self.assertEqual(inv.args, ("-",))
        self.assertEqual(dict(inv.kwargs), {"suffix": "!"})

    def test_keywords_bind_before_positionals(self) -> None:
        from pmapper import adapt

        def join(a, b, c="", *rest, sep=""):
            return sep.join((a, b, c) + rest)

        inv = adapt(join, "q")
        self.assertEqual(inv.call_arguments(("p",), {"b": "B"}), (("p", "B", "q"), {}))
        self.assertEqual(inv("p", b="B"), "pBq")
        self.assertEqual(adapt(join, "x", "y", sep="/")(c="C"), "x/y/C")
        self.assertEqual(adapt(join, "x", "y", "z", "w")(b="B"), "xByzw")

    def test_extras_clashing_with_element_keywords_fail_binding(self) -> None:
        from pmapper import adapt

        inv = adapt(lambda x, y: x + y, y=1)
        with self.assertRaises(TypeError):
            inv.check_binding((), {"x": 1, "y": 2})

    def test_formula_strings_compile_once(self) -> None:
        from pmapper import InvocableKind, adapt

        inv = adapt("~ .x * .y")
        self.assertIs(inv.kind, InvocableKind.POSITIONAL_FORMULA)
        self.assertEqual(inv.min_args, 2)
        self.assertEqual(inv(3, 4), 12)
        with self.assertRaises(TypeError):
            inv.check_binding((1,), {})

    def test_formula_errors_surface_at_adaptation(self) -> None:
        from pmapper import InvalidCallableError, adapt

        with self.assertRaises(InvalidCallableError) as ctx:
            adapt("~ .x +")
        self.assertEqual(ctx.exception.span, (6, 6))
        self.assertIsInstance(ctx.exception, TypeError)

        with self.assertRaises(InvalidCallableError) as unknown:
            adapt("~ system(.x)")
        self.assertIsNone(unknown.exception.span)
        self.assertIn("system", str(unknown.exception))

    def test_names_and_indices_become_extractors(self) -> None:
        from pmapper import InvocableKind, adapt

        by_name = adapt("a")
        self.assertIs(by_name.kind, InvocableKind.FIELD_EXTRACTOR)
        self.assertEqual(by_name({"a": 1, "b": 2}), 1)
        self.assertIsNone(by_name({"b": 2}))

        by_index = adapt(1)
        self.assertEqual(by_index([10, 20, 30]), 20)
        self.assertEqual(adapt(-1)([10, 20, 30]), 30)
        self.assertIsNone(by_index([10]))

    def test_extractor_paths_and_attributes(self) -> None:
        from pmapper import adapt

        record = {"a": [{"b": 5}]}
        self.assertEqual(adapt(("a", 0, "b"))(record), 5)
        self.assertEqual(adapt(["a", 0, "b"])(record), 5)
        self.assertIsNone(adapt(("a", 3, "b"))(record))
        self.assertEqual(adapt("name")(SimpleNamespace(name="n")), "n")

    def test_extractor_on_named_results(self) -> None:
        from pmapper import NamedList, adapt

        named = NamedList([1, 2], names=("a", "b"))
        self.assertEqual(adapt("b")(named), 2)
        self.assertEqual(adapt(0)(named), 1)
        self.assertIsNone(adapt("z")(named))

    def test_extractor_uses_first_argument_only(self) -> None:
        from pmapper import adapt

        inv = adapt("a", "ignored", flag=True)
        self.assertEqual(inv({"a": 1}, {"a": 2}), 1)
        keyword_only = adapt("a", flag=True)
        self.assertEqual(keyword_only(first={"a": 3}), 3)

    def test_extract_with_default(self) -> None:
        from pmapper import InvalidCallableError, extract

        inv = extract("missing", default=0)
        self.assertEqual(inv({}), 0)
        with self.assertRaises(InvalidCallableError):
            extract()

    def test_invocables_pass_through(self) -> None:
        from pmapper import adapt

        inv = adapt(operator.sub)
        self.assertIs(adapt(inv), inv)
        shifted = adapt(inv, 1)
        self.assertEqual(shifted(10), 9)

    def test_unrecognised_shapes_are_rejected(self) -> None:
        from pmapper import InvalidCallableError, adapt

        for spec in (3.5, None, True, (), ("a", 1.5), object()):
            with self.subTest(spec=spec):
                with self.assertRaises(InvalidCallableError):
                    adapt(spec)


if __name__ == "__main__":
    unittest.main()
