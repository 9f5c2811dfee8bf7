"""Tests for the command line entry point."""

import io
import os
import stat
import tempfile
import unittest
from datetime import datetime, timezone
from unittest.mock import patch

from ftpfs.__main__ import build_parser, format_entry, main, run_command
from ftpfs.clients.filesystem import FileSystem
from ftpfs.filemetadata import FileMetadata
from tests.fixtures.test_data import FakeConnection, FakePool, TestDataFixtures


class TestFormatEntry(unittest.TestCase):
    def test_file(self):
        info = FileMetadata(
            name="lorem.txt",
            size=12,
            mode=stat.S_IFREG | 0o644,
            modified_time=datetime(2015, 2, 16, 8, 41, 48, tzinfo=timezone.utc),
        )
        self.assertEqual(
            format_entry(info),
            "-rw-r--r--           12 2015-02-16 08:41:48 lorem.txt",
        )

    def test_directory(self):
        info = FileMetadata(
            name="sub",
            size=0,
            mode=stat.S_IFDIR | 0o755,
            modified_time=datetime(2015, 2, 16, tzinfo=timezone.utc),
        )
        self.assertTrue(format_entry(info).startswith("drwxr-xr-x"))


class TestRunCommand(unittest.TestCase):
    def run_cli(self, argv, *replies, data_lines=None):
        args = build_parser().parse_args(["remote"] + argv)
        conn = FakeConnection(list(replies), data_lines=data_lines)
        out = io.StringIO()
        run_command(FileSystem(FakePool(conn)), args, out)
        return out.getvalue(), conn

    def test_ls(self):
        out, conn = self.run_cli(
            ["ls", "/pub"],
            "150 Opening",
            "226 Done",
            data_lines=TestDataFixtures.mlsd_listing(),
        )

        self.assertEqual(conn.sent, ["MLSD /pub"])
        self.assertIn("lorem.txt", out)
        self.assertIn("subdir", out)

    def test_pwd(self):
        out, _ = self.run_cli(["pwd"], '257 "/" is current directory')
        self.assertEqual(out, "/\n")

    def test_mv(self):
        _, conn = self.run_cli(["mv", "/a", "/b"], "350 Ready", "250 Done")
        self.assertEqual(conn.sent, ["RNFR /a", "RNTO /b"])

    def test_rm(self):
        _, conn = self.run_cli(["rm", "/a"], "250 Done")
        self.assertEqual(conn.sent, ["DELE /a"])


class TestMain(unittest.TestCase):
    def test_missing_config_file(self):
        with patch("sys.stderr", new_callable=io.StringIO) as stderr:
            status = main(["--config", "/nonexistent/ftpfs.toml", "remote", "pwd"])

        self.assertEqual(status, 1)
        self.assertIn("not found", stderr.getvalue())

    def test_unknown_remote(self):
        with tempfile.NamedTemporaryFile("wb", suffix=".toml", delete=False) as fp:
            fp.write(b'[mirror]\ntype = "ftp"\nhost = "ftp.example.com"\n')
        try:
            with patch("sys.stderr", new_callable=io.StringIO) as stderr:
                status = main(["--config", fp.name, "other", "pwd"])
        finally:
            os.unlink(fp.name)

        self.assertEqual(status, 1)
        self.assertIn("other", stderr.getvalue())

    @patch("ftpfs.__main__.FtplibPool")
    def test_runs_against_pool(self, mock_pool_class):
        pool = FakePool(FakeConnection(['257 "/home" is current directory']))
        mock_pool_class.return_value.__enter__.return_value = pool

        with tempfile.NamedTemporaryFile("wb", suffix=".toml", delete=False) as fp:
            fp.write(b'[mirror]\ntype = "ftp"\nhost = "ftp.example.com"\n')
        try:
            with patch("sys.stdout", new_callable=io.StringIO) as stdout:
                status = main(["--config", fp.name, "mirror", "pwd"])
        finally:
            os.unlink(fp.name)

        self.assertEqual(status, 0)
        self.assertEqual(stdout.getvalue(), "/home\n")


if __name__ == "__main__":
    unittest.main()
