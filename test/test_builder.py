"""
CommandsBuilder configuration tests.

Scope
- Validate delimiters (single character, literal string, regular expression).
- Validate invoker providers, parser overrides and filters.
- Validate configuration faults and build() snapshots.

Conventions
- Test method names follow CamelCase per project convention.
"""

import re
import unittest
from unittest import TestCase

from herald import (
    Commands,
    CommandsBuilder,
    Delimiter,
    Marker,
    ReflectiveInvoker,
    ResultType,
    command,
    default,
    remaining,
)
from herald.faults import (
    ConfigurationError,
    InvalidContextError,
    InvalidDelimiterError,
    InvalidFilterError,
    InvalidInvokerError,
    InvalidKeyError,
    InvalidParserError,
)


class User:
    def __init__(self, level=0):
        self.level = level
        self.received = []


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y


class Admin(Marker):
    pass


class AdminFilter:
    def filter(self, context, marker, key, arguments, /):
        return context.level >= 10


class Pair:
    @command
    def test(self, user: User, a: str, b: str) -> None:
        user.received.append((a, b))


class Rest:
    @command
    def test(self, user: User, first: str, rest: str = remaining()) -> None:
        user.received.append((first, rest))


class Dashed:
    @command("my-key")
    def test(self, user: User) -> None:
        pass


class Fallback:
    @command
    def test(self, user: User, value: str = default("fallback")) -> None:
        user.received.append(value)


class Shout:
    @command
    def test(self, user: User, value: str) -> None:
        user.received.append(value)


class Locate:
    @command
    def locate(self, user: User, point: Point) -> None:
        user.received.append((point.x, point.y))


class Moderation:
    @Admin()
    @command
    def kick(self, user: User, target: str) -> None:
        user.received.append(target)


def parse_point(text, /):
    x, y = text.split(",")
    return Point(int(x), int(y))


class TestDelimiters(TestCase):
    """Messages split on the configured delimiter."""

    def execute(self, delimiter, message, container=None):
        commands = CommandsBuilder.for_type(User).set_delimiter(delimiter).build()
        commands.register(container or Pair())
        user = User()
        result = commands.execute(user, message)
        return result, user.received

    def testDefaultDelimiterIsSpace(self):
        commands = CommandsBuilder.for_type(User).build()
        self.assertEqual(commands.delimiter, Delimiter(" "))

    def testSingleCharacterDelimiter(self):
        result, received = self.execute("-", "test-a-b")
        self.assertTrue(result)
        self.assertEqual(received, [("a", "b")])

    def testStringDelimiter(self):
        result, received = self.execute("__", "test__a__b")
        self.assertTrue(result)
        self.assertEqual(received, [("a", "b")])

    def testPatternDelimiter(self):
        result, received = self.execute(re.compile(r"\^"), "test^a^b")
        self.assertTrue(result)
        self.assertEqual(received, [("a", "b")])

    def testRemainingKeepsDelimiter(self):
        result, received = self.execute("-", "test-a-b-c", Rest())
        self.assertTrue(result)
        self.assertEqual(received, [("a", "b-c")])

    def testKeyContainingDelimiterRejected(self):
        commands = CommandsBuilder.for_type(User).set_delimiter("-").build()
        with self.assertRaises(InvalidKeyError):
            commands.register(Dashed())

    def testEmptyDelimiterRejected(self):
        with self.assertRaises(InvalidDelimiterError):
            CommandsBuilder.for_type(User).set_delimiter("")

    def testEmptyMatchingPatternRejected(self):
        with self.assertRaises(InvalidDelimiterError):
            CommandsBuilder.for_type(User).set_delimiter(re.compile(r"x*"))


class TestInvokers(TestCase):
    """Invoker providers own the final call."""

    def testDefaultProvider(self):
        commands = CommandsBuilder.for_type(User).build()
        self.assertIs(commands.invoker_provider, ReflectiveInvoker)
        commands.register(Shout())
        self.assertIsInstance(commands["test"].invoker, ReflectiveInvoker)

    def testCustomProvider(self):
        calls = []

        def provider(container, method):
            def invoke(context, *arguments):
                calls.append((method.__name__, arguments))
            return invoke

        commands = CommandsBuilder.for_type(User).set_invoker_provider(provider).build()
        commands.register(Shout())
        user = User()
        self.assertTrue(commands.execute(user, "test hello"))
        self.assertEqual(calls, [("test", ("hello",))])
        self.assertEqual(user.received, [])

    def testNonCallableProviderRejected(self):
        with self.assertRaises(InvalidInvokerError):
            CommandsBuilder.for_type(User).set_invoker_provider("provider")

    def testProviderReturningNonCallableRejected(self):
        commands = CommandsBuilder.for_type(User).set_invoker_provider(lambda container, method: None).build()
        with self.assertRaises(InvalidInvokerError):
            commands.register(Shout())


class TestParsersConfiguration(TestCase):
    """add_parser() adds and overrides parsers."""

    def testOverrideDefaultParser(self):
        commands = CommandsBuilder.for_type(User).add_parser(str, str.upper).build()
        commands.register(Shout())
        user = User()
        self.assertTrue(commands.execute(user, "test hello"))
        self.assertEqual(user.received, ["HELLO"])

    def testParserRunsOncePerParameter(self):
        calls = []

        def counting(text, /):
            calls.append(text)
            return text

        commands = CommandsBuilder.for_type(User).add_parser(str, counting).build()
        commands.register(Fallback())
        user = User()
        self.assertTrue(commands.execute(user, "test"))
        self.assertEqual(calls, ["fallback"])
        self.assertTrue(commands.execute(user, "test x"))
        self.assertEqual(calls, ["fallback", "x"])
        self.assertEqual(user.received, ["fallback", "x"])

    def testCustomType(self):
        commands = CommandsBuilder.for_type(User).add_parser(Point, parse_point).build()
        commands.register(Locate())
        user = User()
        self.assertTrue(commands.execute(user, "locate 3,4"))
        self.assertEqual(user.received, [(3, 4)])
        self.assertIs(commands.execute(user, "locate 3").type, ResultType.ERROR)

    def testNonClassKeyRejected(self):
        with self.assertRaises(InvalidParserError):
            CommandsBuilder.for_type(User).add_parser("int", int)

    def testNonCallableParserRejected(self):
        with self.assertRaises(InvalidParserError):
            CommandsBuilder.for_type(User).add_parser(int, 5)


class TestFiltersConfiguration(TestCase):
    """add_filter() attaches behavior to marker types."""

    def testFilterObject(self):
        commands = CommandsBuilder.for_type(User).add_filter(Admin, AdminFilter()).build()
        commands.register(Moderation())
        guest, admin = User(0), User(10)
        self.assertIs(commands.execute(guest, "kick bob").type, ResultType.NO_ACCESS)
        self.assertIs(commands.execute(admin, "kick bob").type, ResultType.SUCCESS)
        self.assertEqual(guest.received, [])
        self.assertEqual(admin.received, ["bob"])

    def testUnfilteredMarkerIgnored(self):
        commands = CommandsBuilder.for_type(User).build()
        commands.register(Moderation())
        self.assertTrue(commands.execute(User(), "kick bob"))

    def testNonMarkerTypeRejected(self):
        with self.assertRaises(InvalidFilterError):
            CommandsBuilder.for_type(User).add_filter(str, lambda *_: True)

    def testNonCallableFilterRejected(self):
        with self.assertRaises(InvalidFilterError):
            CommandsBuilder.for_type(User).add_filter(Admin, "admin")


class TestBuilder(TestCase):
    """Builder validation and snapshot semantics."""

    def testContextMustBeClass(self):
        with self.assertRaises(InvalidContextError):
            CommandsBuilder.for_type("user")

    def testConfigurationErrorIsTypeError(self):
        with self.assertRaises(TypeError):
            CommandsBuilder.for_type(None)
        self.assertTrue(issubclass(InvalidDelimiterError, ConfigurationError))

    def testSettersReturnBuilder(self):
        builder = CommandsBuilder.for_type(User)
        self.assertIs(builder.set_delimiter("-"), builder)
        self.assertIs(builder.add_parser(Point, parse_point), builder)
        self.assertIs(builder.add_filter(Admin, AdminFilter()), builder)
        self.assertIs(builder.set_invoker_provider(ReflectiveInvoker), builder)

    def testBuildSnapshotsSettings(self):
        builder = CommandsBuilder.for_type(User)
        first = builder.build()
        builder.set_delimiter("-").add_parser(Point, parse_point)
        second = builder.build()
        self.assertEqual(first.delimiter, Delimiter(" "))
        self.assertEqual(second.delimiter, Delimiter("-"))
        self.assertNotIn(Point, first.parsers)
        self.assertIn(Point, second.parsers)
        self.assertIs(first.context_type, User)

    def testInstancesAreIndependent(self):
        builder = CommandsBuilder.for_type(User)
        first, second = builder.build(), builder.build()
        first.register(Shout())
        self.assertIn("test", first)
        self.assertNotIn("test", second)
        second.register(Shout())
        self.assertEqual(len(second), 1)

    def testDirectConstruction(self):
        commands = Commands(User, "-", filters={Admin: AdminFilter()})
        self.assertEqual(commands.delimiter, Delimiter("-"))
        self.assertIn(Admin, commands.filters)

    def testPropertiesAreReadOnly(self):
        commands = CommandsBuilder.for_type(User).build()
        with self.assertRaises(AttributeError):
            commands.delimiter = Delimiter("-")
        with self.assertRaises(TypeError):
            commands.parsers[Point] = parse_point


if __name__ == "__main__":
    unittest.main()
