"""Sync Engine Tests.

Tests for export, update, reload and restore against the JSON reference host,
including the backup ordering around every write.
"""

import os
import shutil
import tempfile
import threading
import unittest
from pathlib import Path
from unittest.mock import patch

from complink.app.config import ExporterConfig
from complink.app.state import ExporterState
from complink.core.models.result import Operation, ResultStatus
from complink.infrastructure.json_host import DocumentRecord, JsonDocument, read_component_file


class RecordingPrompt:
    """SavePrompt that accepts the suggested location and remembers the call."""

    def __init__(self, answer=None):
        self.answer = answer
        self.calls = []

    def __call__(self, title, default_dir, default_name):
        self.calls.append((title, default_dir, default_name))
        if self.answer is not None:
            return self.answer
        return os.path.join(default_dir, default_name)


class SyncEngineTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = Path(tempfile.mkdtemp()).resolve()
        self.document = JsonDocument.open(self.temp_dir / "project.skp")
        self.bracket = self.document.add_definition("Bracket", content="v1")
        self.transform = [2.0, 0.0, 0.0, 0.0,
                          0.0, 2.0, 0.0, 0.0,
                          0.0, 0.0, 2.0, 0.0,
                          10.0, 20.0, 0.0, 1.0]
        self.document.add_instance(self.bracket, self.transform, "Hardware")

        self.prompt = RecordingPrompt()
        self.config = ExporterConfig(data_dir=self.temp_dir / "data")
        self.state = ExporterState.create(self.document, config=self.config, prompt=self.prompt)
        self.engine = self.state.engine

        self.primary = self.temp_dir / "kaynak" / "Bracket.skp"
        self.backup = self.temp_dir / "kaynak" / "yedek" / "Bracket.skp"

    def tearDown(self) -> None:
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def content_of(self, path: Path) -> str:
        return read_component_file(path).content


class TestExport(SyncEngineTestCase):
    def test_first_export_creates_primary_backup_and_link(self) -> None:
        result = self.engine.export(self.bracket)

        self.assertTrue(result.ok)
        self.assertEqual(result.operation, Operation.EXPORT)
        self.assertEqual(result.file_path, str(self.primary))
        self.assertTrue(self.primary.is_file())
        self.assertTrue(self.backup.is_file())
        self.assertEqual(self.primary.read_bytes(), self.backup.read_bytes())

        identity = self.state.registry.identity_of(self.bracket)
        self.assertEqual(self.state.registry.get_link(identity), str(self.primary))

    def test_first_export_reseeds_stale_backup(self) -> None:
        self.backup.parent.mkdir(parents=True)
        self.backup.write_text('{"name": "Bracket", "content": "stale"}', encoding="utf-8")

        result = self.engine.export(self.bracket)

        self.assertTrue(result.ok)
        self.assertEqual(self.primary.read_bytes(), self.backup.read_bytes())
        self.assertEqual(self.content_of(self.backup), "v1")

    def test_prompt_defaults_to_source_folder(self) -> None:
        self.engine.export(self.bracket)

        title, default_dir, default_name = self.prompt.calls[0]
        self.assertIn(".skp", title)
        self.assertEqual(default_dir, str(self.temp_dir / "kaynak"))
        self.assertEqual(default_name, "Bracket.skp")

    def test_extension_is_appended_once(self) -> None:
        self.prompt.answer = str(self.temp_dir / "out" / "Custom")
        result = self.engine.export(self.bracket)

        self.assertTrue(result.ok)
        self.assertEqual(result.file_path, str(self.temp_dir / "out" / "Custom.skp"))

        other = self.document.add_definition("Plate", content="p")
        self.prompt.answer = str(self.temp_dir / "out" / "Plate.SKP")
        result = self.engine.export(other)
        self.assertEqual(result.file_path, str(self.temp_dir / "out" / "Plate.SKP"))

    def test_cancelled_prompt_changes_nothing(self) -> None:
        self.prompt.answer = "   "
        result = self.engine.export(self.bracket)

        self.assertEqual(result.status, ResultStatus.CANCELLED)
        self.assertFalse(self.state.registry.is_linked(self.bracket))
        self.assertFalse(self.primary.exists())

    def test_linked_export_reuses_path_without_prompting(self) -> None:
        self.engine.export(self.bracket)
        self.bracket.content = "v2"

        result = self.engine.export(self.bracket)

        self.assertTrue(result.ok)
        self.assertEqual(len(self.prompt.calls), 1)
        self.assertEqual(self.content_of(self.primary), "v2")
        self.assertEqual(self.content_of(self.backup), "v1")

    def test_export_without_prompt_fails_not_linked(self) -> None:
        self.engine.prompt = None
        result = self.engine.export(self.bracket)

        self.assertFalse(result.ok)
        self.assertEqual(result.error_code, "not_linked")

    def test_unnamed_component_gets_default_name(self) -> None:
        blank = self.document.add_definition("", content="x")
        self.engine.export(blank)

        self.assertEqual(self.prompt.calls[-1][2], "Component.skp")


class TestUpdate(SyncEngineTestCase):
    def test_update_requires_link(self) -> None:
        result = self.engine.update(self.bracket)

        self.assertFalse(result.ok)
        self.assertEqual(result.error_code, "not_linked")
        self.assertFalse(self.primary.exists())

    def test_update_snapshots_previous_primary(self) -> None:
        self.engine.export(self.bracket)
        self.bracket.content = "v2"

        result = self.engine.update(self.bracket)

        self.assertTrue(result.ok)
        self.assertEqual(result.warnings, [])
        self.assertEqual(self.content_of(self.primary), "v2")
        self.assertEqual(self.content_of(self.backup), "v1")

    def test_update_with_missing_primary_keeps_manual_backup(self) -> None:
        self.engine.export(self.bracket)
        self.backup.write_text('{"name": "Bracket", "content": "hand edited"}', encoding="utf-8")
        self.primary.unlink()
        self.bracket.content = "v3"

        result = self.engine.update(self.bracket)

        self.assertTrue(result.ok)
        self.assertEqual(self.content_of(self.primary), "v3")
        self.assertEqual(self.content_of(self.backup), "hand edited")

    def test_backup_failure_is_reported_as_warning(self) -> None:
        with patch.object(self.engine.backups, "snapshot", return_value=False):
            exported = self.engine.export(self.bracket)

            self.assertTrue(exported.ok)
            self.assertEqual(len(exported.warnings), 1)
            self.assertIn("Initial backup failed", exported.warnings[0])
            self.assertEqual(self.content_of(self.primary), "v1")

            self.bracket.content = "v2"
            updated = self.engine.update(self.bracket)

        self.assertTrue(updated.ok)
        self.assertIn("Backup before overwrite failed", updated.warnings[0])
        self.assertEqual(self.content_of(self.primary), "v2")

    def test_update_by_path_unknown_file(self) -> None:
        result = self.engine.update_by_path(str(self.temp_dir / "nowhere.skp"))

        self.assertFalse(result.ok)
        self.assertEqual(result.error_code, "not_found")

    def test_write_failure_surfaces(self) -> None:
        self.engine.export(self.bracket)
        self.bracket.save_as = lambda path: False

        result = self.engine.update(self.bracket)

        self.assertFalse(result.ok)
        self.assertEqual(result.error_code, "write_failed")


class TestRestoreAndReload(SyncEngineTestCase):
    def test_restore_without_backup(self) -> None:
        self.engine.export(self.bracket)
        self.backup.unlink()

        result = self.engine.restore(self.bracket)

        self.assertFalse(result.ok)
        self.assertEqual(result.error_code, "backup_not_found")

    def test_update_restore_reload_round_trip(self) -> None:
        self.engine.export(self.bracket)
        self.bracket.content = "v2"
        self.engine.update(self.bracket)

        restored = self.engine.restore(self.bracket)
        self.assertTrue(restored.ok)
        self.assertEqual(self.content_of(self.primary), "v1")
        # Scene content is untouched until reload
        self.assertEqual(self.bracket.content, "v2")

        reloaded = self.engine.reload(self.bracket)
        self.assertTrue(reloaded.ok)

        instances = self.document.instances()
        self.assertEqual(len(instances), 1)
        self.assertEqual(instances[0].definition.content, "v1")
        self.assertEqual(instances[0].transformation, self.transform)
        self.assertEqual(instances[0].layer, "Hardware")

    def test_reload_moves_link_and_notes_to_new_definition(self) -> None:
        self.engine.export(self.bracket)
        old_identity = self.state.registry.identity_of(self.bracket)
        self.state.notes.append(old_identity, "Hole spacing checked")

        result = self.engine.reload(self.bracket)
        self.assertTrue(result.ok)

        current = self.state.registry.find_by_path(str(self.primary))
        self.assertIsNotNone(current)
        self.assertIsNot(current, self.bracket)
        self.assertFalse(self.state.registry.is_linked(self.bracket))

        notes = self.state.notes_for_path(str(self.primary))
        self.assertEqual([n.text for n in notes], ["Hole spacing checked"])

    def test_reload_replaces_every_placed_instance(self) -> None:
        second = [1.0, 0.0, 0.0, 0.0,
                  0.0, 1.0, 0.0, 0.0,
                  0.0, 0.0, 1.0, 0.0,
                  -5.0, 0.0, 3.0, 1.0]
        self.document.add_instance(self.bracket, second, "Fixings")
        plate = self.document.add_definition("Plate", content="p")
        self.document.add_instance(plate)
        self.engine.export(self.bracket)

        result = self.engine.reload(self.bracket)
        self.assertTrue(result.ok)

        current = self.state.registry.find_by_path(str(self.primary))
        placed = [i for i in self.document.instances() if i.definition is current]
        self.assertEqual(len(placed), 2)
        self.assertEqual(
            sorted((i.layer, i.transformation) for i in placed),
            sorted([("Hardware", self.transform), ("Fixings", second)]),
        )
        self.assertFalse(any(i.definition is self.bracket for i in self.document.instances()))
        self.assertTrue(any(i.definition is plate for i in self.document.instances()))

    def test_reload_missing_file(self) -> None:
        self.engine.export(self.bracket)
        self.primary.unlink()

        result = self.engine.reload(self.bracket)

        self.assertFalse(result.ok)
        self.assertEqual(result.error_code, "not_found")

    def test_reload_without_placed_instance(self) -> None:
        loose = self.document.add_definition("Loose", content="l")
        self.engine.export(loose)

        result = self.engine.reload(loose)

        self.assertFalse(result.ok)
        self.assertEqual(result.error_code, "not_found")

    def test_reload_unreadable_file(self) -> None:
        self.engine.export(self.bracket)
        self.primary.write_text("not a component", encoding="utf-8")

        result = self.engine.reload(self.bracket)

        self.assertFalse(result.ok)
        self.assertEqual(result.error_code, "reload_failed")
        self.assertIs(self.document.instances()[0].definition, self.bracket)

    def test_restore_by_path_needs_no_definition(self) -> None:
        self.engine.export(self.bracket)
        self.bracket.content = "v2"
        self.engine.update(self.bracket)

        result = self.engine.restore_by_path(str(self.primary))

        self.assertTrue(result.ok)
        self.assertEqual(self.content_of(self.primary), "v1")


class TestLocking(SyncEngineTestCase):
    def test_locks_are_released_after_each_operation(self) -> None:
        self.engine.export(self.bracket)
        self.engine.update(self.bracket)
        self.engine.restore(self.bracket)
        self.engine.update_by_path(str(self.temp_dir / "nowhere.skp"))
        self.engine.reload(self.bracket)

        self.assertEqual(self.engine._locks, {})

    def test_first_export_keeps_the_same_lock(self) -> None:
        document = JsonDocument(DocumentRecord(durable_ids=False), path=self.temp_dir / "plain.skp")
        plate = document.add_definition("Plate", content="p")
        state = ExporterState.create(document, config=self.config, prompt=self.prompt)
        seen = []

        original = state.registry.set_link

        def recording_set_link(definition, file_path):
            seen.append(set(state.engine._locks))
            original(definition, file_path)
            seen.append(set(state.engine._locks))

        state.registry.set_link = recording_set_link
        self.assertTrue(state.engine.export(plate).ok)

        self.assertEqual(len(seen), 2)
        self.assertEqual(seen[0], seen[1])
        self.assertEqual(state.engine._locks, {})

    def test_restore_by_path_waits_for_operation_on_same_component(self) -> None:
        self.engine.export(self.bracket)
        results = []

        with self.engine._guard(self.bracket):
            worker = threading.Thread(
                target=lambda: results.append(self.engine.restore_by_path(str(self.primary)))
            )
            worker.start()
            worker.join(timeout=0.2)
            self.assertTrue(worker.is_alive())

        worker.join(timeout=5)
        self.assertFalse(worker.is_alive())
        self.assertTrue(results[0].ok)
        self.assertEqual(self.engine._locks, {})


if __name__ == "__main__":
    unittest.main()
