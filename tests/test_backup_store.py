"""Backup Store Tests.

Tests for the single-depth backup kept next to each linked file.
"""

import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from complink.core.errors import BackupNotFoundError, DirectoryCreateFailedError
from complink.systems.storage.backup_store import BackupStore


class TestBackupStore(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = Path(tempfile.mkdtemp())
        self.store = BackupStore("yedek")
        self.primary = self.temp_dir / "kaynak" / "Bracket.skp"
        self.primary.parent.mkdir(parents=True)
        self.primary.write_text("v1", encoding="utf-8")

    def tearDown(self) -> None:
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_backup_path_is_sibling_folder(self) -> None:
        self.assertEqual(
            self.store.backup_path(self.primary),
            self.temp_dir / "kaynak" / "yedek" / "Bracket.skp",
        )
        self.assertFalse(self.store.backup_exists(self.primary))

    def test_snapshot_overwrites_previous_backup(self) -> None:
        self.assertTrue(self.store.snapshot(self.primary))
        self.primary.write_text("v2", encoding="utf-8")
        self.assertTrue(self.store.snapshot(self.primary))

        backup = self.store.backup_path(self.primary)
        self.assertEqual(backup.read_text(encoding="utf-8"), "v2")
        # Exactly one generation is kept
        self.assertEqual(len(list(backup.parent.iterdir())), 1)

    def test_snapshot_failure_is_reported_not_raised(self) -> None:
        with patch("complink.systems.storage.backup_store.shutil.copy2", side_effect=OSError("disk full")):
            self.assertFalse(self.store.snapshot(self.primary))

    def test_snapshot_of_missing_file(self) -> None:
        self.assertFalse(self.store.snapshot(self.temp_dir / "kaynak" / "Missing.skp"))

    def test_ensure_backup_dir_failure(self) -> None:
        with patch.object(Path, "mkdir", side_effect=PermissionError("denied")):
            self.assertFalse(self.store.ensure_backup_dir(self.primary))

    def test_ensure_parent_dir_failure_raises(self) -> None:
        with patch.object(Path, "mkdir", side_effect=PermissionError("denied")):
            with self.assertRaises(DirectoryCreateFailedError):
                self.store.ensure_parent_dir(self.temp_dir / "new" / "Plate.skp")

    def test_restore_copies_backup_over_primary(self) -> None:
        self.store.snapshot(self.primary)
        self.primary.write_text("broken", encoding="utf-8")

        restored = self.store.restore(self.primary)

        self.assertEqual(restored, self.primary)
        self.assertEqual(self.primary.read_text(encoding="utf-8"), "v1")

    def test_restore_without_backup(self) -> None:
        with self.assertRaises(BackupNotFoundError) as ctx:
            self.store.restore(self.primary)
        self.assertEqual(ctx.exception.code, "backup_not_found")


if __name__ == "__main__":
    unittest.main()
