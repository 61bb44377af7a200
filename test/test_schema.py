"""
Schema module behavioral tests (flag naming, nesting, exclusion, zero values).

Scope
- Validate default and explicit flag names (case folding, dash stripping).
- Validate named/embedded/optional sub-records and the materialization side effect.
- Validate exclusion ("-") and private fields, deferred unsupported kinds.
- Validate collisions, frozen records and Target bindings.

Conventions
- Test method names follow CamelCase per project convention.
"""
import dataclasses
import datetime
import unittest
import warnings
from dataclasses import dataclass, field
from unittest import TestCase

from argbind import (
    Bool,
    String,
    SignedInt,
    UnsignedInt,
    List,
    Excluded,
    Timestamp,
    Uint16,
    DuplicatedFlagWarning,
    arg,
    build,
    zero,
)


@dataclass
class Sub:
    Count: int = 0
    toggle: bool = arg("--bool", default=False)


@dataclass
class Required:
    count: int
    when: datetime.datetime
    names: list[str]
    inner: Sub
    label: str = "kept"


@dataclass
class Args:
    verbose: bool = False
    Name: str = ""
    ports: list[Uint16] = arg("port", default_factory=list)
    sub: Sub = arg("section", default_factory=Sub)
    base: Sub = arg(embedded=True, default_factory=Sub)
    maybe: Sub | None = None
    required: Required | None = None
    ignored: str = arg("-", default="")
    _private: str = arg("private", default="")
    table: dict[str, str] = field(default_factory=dict)
    when: datetime.datetime | None = None


@dataclass(frozen=True)
class Frozen:
    value: int = 0


class TestNames(TestCase):
    """Flag naming rules."""

    def setUp(self):
        self.args = Args()
        self.mapping = build(self.args)

    def testFlagSet(self):
        self.assertEqual(set(self.mapping), {
            "verbose",
            "name",
            "port",
            "section-count",
            "section-bool",
            "count",
            "bool",
            "maybe-count",
            "maybe-bool",
            "required-count",
            "required-when",
            "required-names",
            "required-inner-count",
            "required-inner-bool",
            "required-label",
            "table",
            "when",
        })

    def testDefaultNameIsLowercased(self):
        self.assertIn("name", self.mapping)
        self.assertNotIn("Name", self.mapping)

    def testExplicitNameDashesStripped(self):
        self.assertIn("section-bool", self.mapping)
        self.assertNotIn("section---bool", self.mapping)

    def testNamedSubRecordIsPrefixed(self):
        target = self.mapping["section-count"]
        self.assertIs(target.owner, self.args.sub)
        self.assertEqual(target.attribute, "Count")

    def testEmbeddedSubRecordIsMerged(self):
        self.assertIs(self.mapping["bool"].owner, self.args.base)
        self.assertIs(self.mapping["count"].owner, self.args.base)

    def testExcludedAndPrivateFieldsAreAbsent(self):
        for name in ("ignored", "-", "private", "_private"):
            with self.subTest(name=name):
                self.assertNotIn(name, self.mapping)


class TestKinds(TestCase):
    """Targets carry resolved kinds."""

    def testKinds(self):
        mapping = build(Args())
        self.assertEqual(mapping["verbose"].kind, Bool())
        self.assertEqual(mapping["name"].kind, String())
        self.assertEqual(mapping["port"].kind, List(UnsignedInt(16)))
        self.assertEqual(mapping["section-count"].kind, SignedInt(64))
        self.assertEqual(mapping["when"].kind, Timestamp())
        self.assertEqual(mapping["required-names"].kind, List(String()))

    def testUnsupportedTypesAreDeferred(self):
        self.assertEqual(build(Args())["table"].kind, Excluded(dict[str, str]))


class TestOptionalSubRecords(TestCase):
    """Empty optional sub-records are materialized during build()."""

    def testMaterializedAndAttached(self):
        args = Args()
        self.assertIsNone(args.maybe)
        mapping = build(args)
        self.assertEqual(args.maybe, Sub())
        self.assertIs(mapping["maybe-count"].owner, args.maybe)

    def testExistingInstanceIsKept(self):
        existing = Sub(Count=7)
        args = Args(maybe=existing)
        build(args)
        self.assertIs(args.maybe, existing)

    def testRequiredFieldsGetZeroValues(self):
        args = Args()
        build(args)
        self.assertEqual(args.required, Required(
            count=0,
            when=datetime.datetime.min.replace(tzinfo=datetime.timezone.utc),
            names=[],
            inner=Sub(),
        ))
        self.assertEqual(args.required.label, "kept")


class TestZero(TestCase):
    """zero() values."""

    def testLeaves(self):
        self.assertIs(zero(bool), False)
        self.assertEqual(zero(str), "")
        self.assertEqual(zero(int), 0)
        self.assertEqual(zero(Uint16), 0)
        self.assertEqual(zero(float), 0.0)
        self.assertEqual(zero(list[int]), [])
        self.assertEqual(zero(dict[str, str]), {})

    def testOptionalIsNone(self):
        self.assertIsNone(zero(Sub | None))
        self.assertIsNone(zero(int | None))

    def testRecord(self):
        self.assertEqual(zero(Sub), Sub())


class TestTargets(TestCase):
    """Target bindings write into the original record."""

    def testSetWritesThrough(self):
        args = Args()
        mapping = build(args)
        mapping["section-count"].set(5)
        mapping["verbose"].set(True)
        self.assertEqual(args.sub.Count, 5)
        self.assertTrue(args.verbose)
        self.assertEqual(mapping["section-count"].get(), 5)

    def testTargetName(self):
        self.assertEqual(build(Args())["section-bool"].name, "section-bool")


class TestCollisions(TestCase):
    """Duplicated flag names."""

    def testLaterFieldWins(self):
        @dataclass
        class Clash:
            first: str = arg("name", default="")
            second: str = arg("name", default="")

        with self.assertWarns(DuplicatedFlagWarning):
            mapping = build(Clash())
        self.assertEqual(mapping["name"].attribute, "second")

    def testEmbeddedCollision(self):
        @dataclass
        class Clash:
            count: int = 0
            base: Sub = arg(embedded=True, default_factory=Sub)

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            mapping = build(Clash())
        self.assertTrue(any(issubclass(item.category, DuplicatedFlagWarning) for item in caught))
        self.assertEqual(mapping["count"].attribute, "Count")


class TestRejectedRecords(TestCase):
    """build() input validation."""

    def testNotADataclass(self):
        with self.assertRaises(TypeError):
            build(object())
        with self.assertRaises(TypeError):
            build(Args)

    def testFrozen(self):
        with self.assertRaises(TypeError):
            build(Frozen())


class TestArg(TestCase):
    """arg() metadata."""

    def testMetadata(self):
        fields = {item.name: item for item in dataclasses.fields(Args)}
        self.assertEqual(fields["sub"].metadata["arg"], "section")
        self.assertTrue(fields["base"].metadata["embedded"])
        self.assertNotIn("arg", fields["base"].metadata)

    def testExtraMetadataIsMerged(self):
        declared = arg("x", default=0, metadata={"help": "x"})
        self.assertEqual(dict(declared.metadata), {"help": "x", "arg": "x"})

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            arg(1)


if __name__ == '__main__':
    unittest.main()
