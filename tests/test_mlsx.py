"""Tests for MLSx fact line and quoted path decoding."""

import stat
import unittest
from datetime import datetime, timezone

from ftpfs.exceptions import DecodeError, DecodeKind
from ftpfs.mlsx import extract_dir_name, parse_mlst
from tests.fixtures.test_data import TestDataFixtures


class TestParseMlst(unittest.TestCase):
    """Test cases for parse_mlst."""

    def assertDecodeError(self, entry, kind, skip_self_parent=True):
        with self.assertRaises(DecodeError) as cm:
            parse_mlst(entry, skip_self_parent)
        self.assertEqual(cm.exception.kind, kind)
        self.assertFalse(cm.exception.temporary)

    def test_file_entry(self):
        info = parse_mlst(TestDataFixtures.FILE_LINE, True)

        self.assertIsNotNone(info)
        self.assertEqual(info.name, "lorem.txt")
        self.assertEqual(info.size, 12)
        self.assertFalse(info.is_directory)
        self.assertEqual(info.mode, 0o644)
        self.assertEqual(
            info.modified_time, datetime(2015, 2, 16, 8, 41, 48, tzinfo=timezone.utc)
        )
        self.assertEqual(info.raw, TestDataFixtures.FILE_LINE)

    def test_file_entries_are_never_directories(self):
        for line in (
            "type=file;size=0;modify=20000101000000; a",
            "Type=File;Size=99;Modify=19991231235959;perm=adfrw; b.bin",
            "type=file;size=5;modify=20240229120000;unix.mode=0755; c",
        ):
            with self.subTest(line=line):
                info = parse_mlst(line, True)
                self.assertFalse(info.is_directory)
                self.assertTrue(info.is_file)

    def test_directory_entry_uses_sizd(self):
        info = parse_mlst(TestDataFixtures.DIR_LINE, True)

        self.assertTrue(info.is_directory)
        self.assertEqual(info.size, 4096)
        self.assertEqual(info.permissions, 0o755)
        self.assertEqual(info.mode, stat.S_IFDIR | 0o755)

    def test_size_preferred_over_sizd(self):
        info = parse_mlst("type=dir;size=10;sizd=20;modify=20150216084148; d", True)
        self.assertEqual(info.size, 10)

    def test_directory_without_size_defaults_to_zero(self):
        info = parse_mlst("type=dir;modify=20150216084148; d", True)
        self.assertEqual(info.size, 0)

    def test_self_parent_skipped(self):
        for typ in ("cdir", "pdir", ".", ".."):
            with self.subTest(type=typ):
                line = f"type={typ};modify=20150216084148; x"
                self.assertIsNone(parse_mlst(line, True))

    def test_self_parent_kept_without_suppression(self):
        for typ in ("cdir", "pdir", ".", ".."):
            with self.subTest(type=typ):
                info = parse_mlst(f"type={typ};modify=20150216084148; x", False)
                self.assertIsNotNone(info)
                self.assertTrue(info.is_directory)
                self.assertTrue(info.mode & stat.S_IFDIR)

    def test_unix_mode_exact_value(self):
        for mode in ("0644", "755", "4755", "0", "777"):
            with self.subTest(mode=mode):
                info = parse_mlst(
                    f"type=file;size=1;modify=20150216084148;UNIX.mode={mode}; f", True
                )
                self.assertEqual(info.mode, int(mode, 8))

    def test_unix_mode_type_bits_ignored_for_file(self):
        info = parse_mlst(
            "type=file;size=1;modify=20150216084148;unix.mode=40644; f", True
        )
        self.assertFalse(info.is_directory)
        self.assertEqual(info.mode, 0o644)
        self.assertEqual(info.size, 1)

    def test_unix_mode_type_bits_ignored_for_directory(self):
        info = parse_mlst("type=dir;modify=20150216084148;unix.mode=100755; d", True)
        self.assertTrue(info.is_directory)
        self.assertEqual(info.mode, stat.S_IFDIR | 0o755)

    def test_unix_mode_wins_over_perm(self):
        info = parse_mlst(
            "type=file;size=1;modify=20150216084148;perm=r;unix.mode=0600; f", True
        )
        self.assertEqual(info.mode, 0o600)

    def test_perm_read_only(self):
        info = parse_mlst("type=file;size=1;modify=20150216084148;perm=r; f", True)
        self.assertEqual(info.mode, 0o400)

    def test_perm_list_is_read_execute(self):
        info = parse_mlst("type=dir;modify=20150216084148;perm=l; d", True)
        self.assertEqual(info.permissions & 0o500, 0o500)

    def test_perm_write_characters(self):
        for c in "adcfmpw":
            with self.subTest(perm=c):
                info = parse_mlst(f"type=file;size=1;modify=20150216084148;perm={c}; f", True)
                self.assertEqual(info.mode, 0o200)

    def test_perm_combined(self):
        info = parse_mlst("type=dir;modify=20150216084148;perm=flcdmpe; d", True)
        self.assertEqual(info.permissions, 0o700)

    def test_default_mode_is_owner_readable(self):
        info = parse_mlst("type=file;size=1;modify=20150216084148; f", True)
        self.assertEqual(info.mode, 0o400)

    def test_fractional_modify(self):
        info = parse_mlst("type=file;size=1;modify=20150216084148.123; f", True)
        self.assertEqual(info.modified_time.microsecond, 123000)
        self.assertEqual(info.modified_time.tzinfo, timezone.utc)

    def test_name_is_last_path_segment(self):
        cases = {
            "/pub/files/lorem.txt": "lorem.txt",
            "pub/dir/": "dir",
            "/": "/",
            "name with spaces.txt": "name with spaces.txt",
            "semi; colon": "semi; colon",
        }
        for path, name in cases.items():
            with self.subTest(path=path):
                info = parse_mlst(f"type=file;size=1;modify=20150216084148; {path}", True)
                self.assertEqual(info.name, name)

    def test_name_keeps_case(self):
        info = parse_mlst("TYPE=FILE;SIZE=1;MODIFY=20150216084148; README.TXT", True)
        self.assertEqual(info.name, "README.TXT")

    def test_malformed_lines(self):
        for line in (
            "type=file;size=12;modify=20150216084148 lorem.txt",
            "lorem.txt",
            "type=file;size;modify=20150216084148; f",
            "type=file;=x;modify=20150216084148; f",
            "type=file;size=abc;modify=20150216084148; f",
            "type=file;size=-1;modify=20150216084148; f",
            "type=dir;sizd=1.5;modify=20150216084148; d",
            "type=file;size=1;modify=20150216084148;unix.mode=0899; f",
        ):
            with self.subTest(line=line):
                self.assertDecodeError(line, DecodeKind.MALFORMED)

    def test_incomplete_lines(self):
        for line in (
            "size=12;modify=20150216084148; f",
            "type=file;modify=20150216084148; f",
            "type=file;size=1; f",
            "type=file;size=1;modify=2015021608; f",
            "type=file;size=1;modify=20151316084148; f",
            "type=file;size=1;modify=20150216084148Z; f",
        ):
            with self.subTest(line=line):
                self.assertDecodeError(line, DecodeKind.INCOMPLETE)

    def test_error_mentions_entry(self):
        with self.assertRaises(DecodeError) as cm:
            parse_mlst("garbage", True)
        self.assertIn("garbage", str(cm.exception))


class TestExtractDirName(unittest.TestCase):
    """Test cases for extract_dir_name."""

    def test_simple(self):
        self.assertEqual(extract_dir_name('"/home/user" is current directory'), "/home/user")

    def test_doubled_quote(self):
        self.assertEqual(extract_dir_name('"A""B" created'), 'A"B')

    def test_leading_text(self):
        self.assertEqual(extract_dir_name('Created "/tmp/new dir" ok'), "/tmp/new dir")

    def test_empty_name(self):
        self.assertEqual(extract_dir_name('"" created'), "")

    def test_invalid(self):
        for msg in ("no quotes here", '"', 'trailing "', '"unterminated'):
            with self.subTest(msg=msg):
                with self.assertRaises(DecodeError) as cm:
                    extract_dir_name(msg)
                self.assertEqual(cm.exception.kind, DecodeKind.MALFORMED)


if __name__ == "__main__":
    unittest.main()
