"""End-to-end tests for dict-gen against a throwaway SQLite file."""

import json

import pytest

from tests.conftest import full_schedule, make_entry
from wotd.cli import main, validate_path_traversal, CliError
from wotd.generator import parse_json, render_all_json, render_json

DB = "data/words.db"


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_dictionary(workdir, by_day, name="dictionary.json"):
    (workdir / name).write_text(render_json(by_day), encoding="utf-8")
    return name


class TestMigrate:
    def test_dry_run_touches_nothing(self, workdir, capsys):
        name = write_dictionary(workdir, full_schedule(365))
        assert main(["migrate", "--input", name, "--db", DB, "--dry-run"]) == 0
        out = capsys.readouterr().out
        assert "DRY RUN MODE" in out
        assert "Words to import: 365" in out
        assert "WARNING: Missing day indexes: 1" in out
        assert not (workdir / DB).exists()

    def test_dry_run_reports_duplicates(self, workdir, capsys):
        entries = list(full_schedule().values()) + [make_entry(9, "anō")]
        (workdir / "dictionary.json").write_text(render_all_json(entries), encoding="utf-8")
        assert main(["migrate", "--input", "dictionary.json", "--dry-run"]) == 0
        assert "Duplicate day indexes: [9]" in capsys.readouterr().out

    def test_migrate_creates_database(self, workdir, capsys):
        name = write_dictionary(workdir, full_schedule())
        assert main(["migrate", "--input", name, "--db", DB]) == 0
        assert (workdir / DB).exists()
        assert "366 words migrated" in capsys.readouterr().out

    def test_second_migration_backs_up_database(self, workdir, capsys):
        name = write_dictionary(workdir, full_schedule())
        assert main(["migrate", "--input", name, "--db", DB]) == 0
        assert main(["migrate", "--input", name, "--db", DB]) == 0
        assert list((workdir / "data").glob("words.db.backup.*"))
        assert "Backup created" in capsys.readouterr().out

    def test_absolute_input_rejected(self, workdir, capsys):
        write_dictionary(workdir, full_schedule(3))
        assert main(["migrate", "--input", str(workdir / "dictionary.json"), "--db", DB]) == 1
        assert "absolute paths not allowed" in capsys.readouterr().err

    def test_missing_input(self, workdir, capsys):
        assert main(["migrate", "--input", "nope.json", "--db", DB]) == 1
        assert "file does not exist" in capsys.readouterr().err

    def test_malformed_input(self, workdir, capsys):
        (workdir / "bad.json").write_text("{oops", encoding="utf-8")
        assert main(["migrate", "--input", "bad.json", "--db", DB]) == 1
        assert "Failed to parse dictionary JSON" in capsys.readouterr().err


class TestValidateAndGenerate:
    def test_full_cycle(self, workdir, capsys):
        by_day = full_schedule()
        by_day[1] = make_entry(1, "āe", "yes", photo="ae.jpg", photo_attribution="Tāne")
        name = write_dictionary(workdir, by_day, "source.json")

        assert main(["migrate", "--input", name, "--db", DB]) == 0
        assert main(["validate", "--db", DB]) == 0
        assert main(["generate", "--db", DB, "--output", "out/dictionary.json"]) == 0

        generated = parse_json((workdir / "out/dictionary.json").read_bytes())
        assert [w.day_index for w in generated.words] == list(range(1, 367))
        assert generated.words[0].word == "āe"
        assert generated.words[0].photo_attribution == "Tāne"
        out = capsys.readouterr().out
        assert "Validation passed" in out
        assert "Format: pretty (indented)" in out

    def test_generate_backs_up_previous_output(self, workdir):
        name = write_dictionary(workdir, full_schedule(), "source.json")
        assert main(["migrate", "--input", name, "--db", DB]) == 0
        assert main(["generate", "--db", DB, "--output", "dictionary.json", "--compact"]) == 0
        assert main(["generate", "--db", DB, "--output", "dictionary.json"]) == 0
        assert list(workdir.glob("dictionary.json.backup.*"))

    def test_incomplete_database_fails_closed(self, workdir, capsys):
        name = write_dictionary(workdir, full_schedule(300), "source.json")
        assert main(["migrate", "--input", name, "--db", DB]) == 0

        assert main(["validate", "--db", DB]) == 1
        assert main(["generate", "--db", DB, "--output", "dictionary.json"]) == 1
        assert not (workdir / "dictionary.json").exists()
        out = capsys.readouterr().out
        assert "Total words: 300 (expected 366)" in out
        assert "Missing indexes: 66" in out
        assert "301-366" in out

    def test_generate_all_includes_unscheduled(self, workdir):
        entries = [make_entry(1, "tahi"), make_entry(None, "kore")]
        (workdir / "source.json").write_text(render_all_json(entries), encoding="utf-8")
        assert main(["migrate", "--input", "source.json", "--db", DB]) == 0
        assert main(["generate", "--all", "--compact", "--db", DB, "--output", "all.json"]) == 0

        doc = json.loads((workdir / "all.json").read_text(encoding="utf-8"))
        assert [(w["index"], w["word"]) for w in doc["dictionary"]] == [(1, "tahi"), (0, "kore")]

    def test_missing_database(self, workdir, capsys):
        assert main(["validate", "--db", "missing.db"]) == 1
        assert main(["generate", "--db", "missing.db"]) == 1
        assert "file does not exist" in capsys.readouterr().err


class TestGlobalFlags:
    def test_verbose_and_quiet_conflict(self, capsys):
        assert main(["-v", "--quiet", "validate"]) == 1
        assert "cannot use --verbose and --quiet together" in capsys.readouterr().err

    def test_quiet_suppresses_output(self, workdir, capsys):
        name = write_dictionary(workdir, full_schedule())
        assert main(["migrate", "--input", name, "--db", DB, "-q"]) == 0
        assert capsys.readouterr().out == ""

    def test_verbose_output(self, workdir, capsys):
        name = write_dictionary(workdir, full_schedule(2))
        assert main(["--verbose", "migrate", "--input", name, "--db", DB, "--dry-run"]) == 0
        assert "[VERBOSE] Parsing JSON..." in capsys.readouterr().out

    def test_usage(self, capsys):
        assert main([]) == 1
        assert main(["help"]) == 0
        assert "dict-gen - Word of the Day Dictionary Generator" in capsys.readouterr().out

    def test_unknown_command(self, capsys):
        assert main(["frobnicate"]) == 1
        assert "Unknown command: frobnicate" in capsys.readouterr().err


@pytest.mark.parametrize("path", ["../dictionary.json", "a/../../b.json"])
def test_path_traversal_rejected(path):
    with pytest.raises(CliError):
        validate_path_traversal(path)


def test_relative_path_allowed():
    validate_path_traversal("data/dictionary.json")
