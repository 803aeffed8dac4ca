"""Tests for maulog/classifier.py"""

import unittest

from maulog.classifier import APP_IDENTIFIERS, AppTag, classify, classify_record, display_name


class TestClassify(unittest.TestCase):
    def test_known_identifier(self):
        self.assertEqual(classify("MSau04"), AppTag.MAU)

    def test_case_insensitive(self):
        self.assertEqual(classify("XCEL2019"), AppTag.EXCEL)
        self.assertEqual(classify("xcel2019"), AppTag.EXCEL)

    def test_surrounding_characters_ignored(self):
        self.assertEqual(classify("com.microsoft.MSWD2019.update"), AppTag.WORD)
        self.assertEqual(classify("[TEAMS21]"), AppTag.TEAMS)

    def test_all_table_entries_resolve(self):
        for substring, tag in APP_IDENTIFIERS:
            self.assertIs(classify(f"x{substring.upper()}x"), tag)

    def test_defender_variants(self):
        for ident in ("WDAVConsumer", "WDAV00", "wdavshim"):
            self.assertEqual(classify(ident), AppTag.DEFENDER)

    def test_unknown_is_other(self):
        self.assertEqual(classify("SomethingElse"), AppTag.OTHER)
        self.assertEqual(classify(""), AppTag.OTHER)


class TestClassifyRecord(unittest.TestCase):
    def test_message_takes_identifier(self):
        self.assertEqual(classify_record("Update for OPIM2019 ready", "MSau04.0"), AppTag.OUTLOOK)

    def test_falls_back_to_source_app(self):
        self.assertEqual(classify_record("Checking for updates", "MSau04.0"), AppTag.MAU)

    def test_no_identifier_formed_across_boundary(self):
        self.assertEqual(classify_record("ms", "au04"), AppTag.OTHER)


class TestDisplayName(unittest.TestCase):
    def test_known(self):
        self.assertEqual(display_name("PPT32019"), "PowerPoint")

    def test_unknown_keeps_identifier(self):
        self.assertEqual(display_name("ABCD01"), "ABCD01")


if __name__ == "__main__":
    unittest.main()
