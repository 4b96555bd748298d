"""
Delimiter tokenization.

Conventions
- Test method names follow CamelCase per project convention.
"""

import re
import unittest
from unittest import TestCase

from herald import Delimiter
from herald.faults import InvalidDelimiterError


class TestDelimiter(TestCase):

    def testSplitKeepsEmptyTokens(self):
        self.assertEqual(Delimiter(" ").split("a  b"), ["a", "", "b"])

    def testSplitLimit(self):
        delimiter = Delimiter(" ")
        self.assertEqual(delimiter.split("a b c", limit=2), ["a", "b c"])
        self.assertEqual(delimiter.split("a b c", limit=1), ["a b c"])
        self.assertEqual(delimiter.split("a b", limit=5), ["a", "b"])

    def testMultiCharacterLiteral(self):
        self.assertEqual(Delimiter("::").split("a::b:c"), ["a", "b:c"])

    def testPatternSplit(self):
        delimiter = Delimiter(re.compile(r"\s+"))
        self.assertEqual(delimiter.split("a   b\tc"), ["a", "b", "c"])
        self.assertEqual(delimiter.split("a   b c", limit=2), ["a", "b c"])

    def testPatternGroupsAreNotTokens(self):
        self.assertEqual(Delimiter(re.compile(r"(,)")).split("a,b"), ["a", "b"])

    def testInvalidSources(self):
        for source in ("", re.compile(r"x*"), re.compile(rb","), 5, None):
            with self.subTest(source=source), self.assertRaises(InvalidDelimiterError):
                Delimiter(source)

    def testInvalidLimit(self):
        with self.assertRaises(ValueError):
            Delimiter(" ").split("a b", limit=0)

    def testOccursIn(self):
        self.assertTrue(Delimiter("-").occurs_in("my-key"))
        self.assertFalse(Delimiter("-").occurs_in("key"))
        self.assertTrue(Delimiter(re.compile(r"\d")).occurs_in("key1"))

    def testValueSemantics(self):
        self.assertEqual(Delimiter("-"), Delimiter(Delimiter("-")))
        self.assertNotEqual(Delimiter("-"), Delimiter("_"))
        self.assertEqual(len({Delimiter("-"), Delimiter("-")}), 1)
        self.assertEqual(repr(Delimiter(re.compile(r"\^"))), r"delimiter('\\^')")

    def testImmutable(self):
        with self.assertRaises(AttributeError):
            Delimiter(" ").source = "-"


if __name__ == "__main__":
    unittest.main()
