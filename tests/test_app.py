"""Tests for journey.app and the journey CLI."""

import json
import logging

import pytest

from journey import JourneyApp, SortOption
from journey.__main__ import main
from journey.core.logging import StructuredFormatter, configure_logging


class TestJourneyApp:
    def test_wires_stores(self, tmp_path):
        with JourneyApp(data_dir=tmp_path) as app:
            assert app.journals.path == tmp_path.resolve() / "journals.json"
            assert app.images.images_dir == tmp_path.resolve() / "JournalImages"
            assert app.images.images_dir.is_dir()

    def test_create_search_sort_delete(self, tmp_path):
        with JourneyApp(data_dir=tmp_path, search_debounce_seconds=10.0) as app:
            for title in ("Banana", "apple", "Cherry"):
                editor = app.editor()
                editor.title = title
                editor.save()

            dash = app.dashboard()
            dash.reload()
            titles = [j.title for j in dash.set_sort_option(SortOption.TITLE_AZ)]
            assert titles == ["apple", "Banana", "Cherry"]

            dash.set_search_text("an")
            assert [j.title for j in dash.flush()] == ["Banana"]

            dash.select(dash.filtered[0])
            assert dash.delete_selected()
            assert len(app.journals.load()) == 2

    def test_seed_samples_once(self, tmp_path):
        app = JourneyApp(data_dir=tmp_path)
        assert app.seed_samples() == 4
        assert app.seed_samples() == 0
        titles = {j.title for j in app.journals.load()}
        assert "My Trip to Paris" in titles

    def test_stats(self, tmp_path):
        app = JourneyApp(data_dir=tmp_path)
        app.seed_samples()
        stats = app.get_stats()
        assert stats["journals"] == 4
        assert stats["with_location"] == 4
        assert stats["images"] == 0

    def test_structured_logging_enabled(self, tmp_path):
        JourneyApp(data_dir=tmp_path, structured_logging=True)
        root = logging.getLogger("journey")
        try:
            assert any(isinstance(h.formatter, StructuredFormatter) for h in root.handlers)
        finally:
            root.handlers.clear()
            root.propagate = True


class TestStructuredLogging:
    def test_json_lines(self, capsys):
        import io

        stream = io.StringIO()
        root = configure_logging(structured=True, level="DEBUG", stream=stream)
        try:
            logging.getLogger("journey.test").info("saved %d journals", 3)
        finally:
            root.handlers.clear()
            root.propagate = True
        record = json.loads(stream.getvalue().strip())
        assert record["msg"] == "saved 3 journals"
        assert record["level"] == "INFO"
        assert record["logger"] == "journey.test"
        assert record["ts"].endswith("Z")

    def test_context_fields(self):
        rec = logging.LogRecord("journey", logging.INFO, __file__, 1, "saved", None, None)
        rec.journal_id = "abc123"
        out = json.loads(StructuredFormatter().format(rec))
        assert out["journal_id"] == "abc123"
        assert "image" not in out

    def test_store_tags_journal_id(self, tmp_path):
        import io

        stream = io.StringIO()
        root = configure_logging(structured=True, level="INFO", stream=stream)
        try:
            app = JourneyApp(data_dir=tmp_path)
            editor = app.editor()
            editor.title = "Tagged"
            saved = editor.save()
        finally:
            root.handlers.clear()
            root.propagate = True
        lines = [json.loads(line) for line in stream.getvalue().splitlines()]
        assert any(line.get("journal_id") == saved.id for line in lines)

    def test_exception_included(self):
        formatter = StructuredFormatter()
        try:
            raise ValueError("bad")
        except ValueError:
            import sys

            rec = logging.LogRecord("journey", logging.ERROR, __file__, 1, "oops", None, sys.exc_info())
        out = json.loads(formatter.format(rec))
        assert "ValueError: bad" in out["exception"]


class TestCLI:
    def _run(self, capsys, *argv):
        code = main(list(argv))
        return code, capsys.readouterr()

    def test_no_command_prints_help(self, capsys):
        code, out = self._run(capsys)
        assert code == 0
        assert "journey" in out.out

    def test_init_with_samples(self, tmp_path, capsys):
        code, out = self._run(capsys, "init", "--data-dir", str(tmp_path), "--with-samples")
        assert code == 0
        assert (tmp_path / "journey.yaml").exists()
        assert "seeded 4" in out.out

    def test_new_list_show_delete(self, tmp_path, capsys):
        d = str(tmp_path)
        photo = tmp_path / "photo.jpg"
        photo.write_bytes(b"jpeg")

        code, out = self._run(
            capsys, "new", "--data-dir", d, "--title", "Lake", "--content", "Cold swim",
            "--location", "Tahoe, CA", "--image", str(photo), "--date", "2025-07-04",
        )
        assert code == 0
        journal_id = out.out.strip()

        code, out = self._run(capsys, "list", "--data-dir", d, "--search", "tahoe")
        listed = json.loads(out.out)
        assert [j["id"] for j in listed] == [journal_id]
        assert listed[0]["snippet"] == "Cold swim"
        assert listed[0]["createdAt"].startswith("2025-07-04")

        code, out = self._run(capsys, "show", "--data-dir", d, journal_id)
        assert code == 0
        assert "Lake" in out.out
        assert "[image: local" in out.out

        code, out = self._run(capsys, "delete", "--data-dir", d, journal_id)
        assert code == 0
        assert list((tmp_path / "JournalImages").iterdir()) == []

        code, out = self._run(capsys, "list", "--data-dir", d)
        assert "No journals found." in out.out

    def test_edit(self, tmp_path, capsys):
        d = str(tmp_path)
        _, out = self._run(capsys, "new", "--data-dir", d, "--title", "Draft")
        journal_id = out.out.strip()
        code, out = self._run(capsys, "edit", "--data-dir", d, journal_id, "--title", "Final")
        assert code == 0
        assert json.loads(out.out)["title"] == "Final"

    def test_unknown_id(self, tmp_path, capsys):
        code, out = self._run(capsys, "show", "--data-dir", str(tmp_path), "missing")
        assert code == 1
        assert "No journal" in out.err
        code, _ = self._run(capsys, "delete", "--data-dir", str(tmp_path), "missing")
        assert code == 1

    def test_list_sorted(self, tmp_path, capsys):
        d = str(tmp_path)
        for title in ("Banana", "apple", "Cherry"):
            self._run(capsys, "new", "--data-dir", d, "--title", title)
        _, out = self._run(capsys, "list", "--data-dir", d, "--sort", "title-za")
        assert [j["title"] for j in json.loads(out.out)] == ["Cherry", "Banana", "apple"]

    def test_profile(self, tmp_path, capsys):
        d = str(tmp_path)
        code, out = self._run(capsys, "profile", "--data-dir", d, "--name", "Lucas", "--email", "l@example.com")
        assert code == 0
        assert json.loads(out.out)["name"] == "Lucas"

        code, out = self._run(capsys, "profile", "--data-dir", d, "--email", "nope")
        assert code == 2
        assert "Invalid email" in out.err

        _, out = self._run(capsys, "profile", "--data-dir", d)
        assert json.loads(out.out)["email"] == "l@example.com"

    def test_config_file(self, tmp_path, capsys):
        data = tmp_path / "elsewhere"
        cfg = tmp_path / "journey.yaml"
        cfg.write_text(f"journey:\n  data_dir: {data}\n", encoding="utf-8")
        code, _ = self._run(capsys, "new", "--config", str(cfg), "--title", "Configured")
        assert code == 0
        assert (data / "journals.json").exists()

    def test_data_dir_config_loaded(self, tmp_path, capsys):
        d = str(tmp_path)
        self._run(capsys, "init", "--data-dir", d)
        cfg = tmp_path / "journey.yaml"
        cfg.write_text(cfg.read_text(encoding="utf-8") + "  snippet_length: 5\n", encoding="utf-8")
        self._run(capsys, "new", "--data-dir", d, "--content", "Cold swim")
        _, out = self._run(capsys, "list", "--data-dir", d)
        assert json.loads(out.out)[0]["snippet"] == "Cold ..."

    def test_bad_sort_rejected(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            main(["list", "--data-dir", str(tmp_path), "--sort", "random"])
