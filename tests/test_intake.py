from pathlib import Path

import pytest

from meeting_mailer.errors import UploadError, UploadLimitError
from meeting_mailer.services import intake
from meeting_mailer.services.intake import classify, intake_files
from meeting_mailer.utils.io import stored_name

TRANSCRIPT = b"Alice: let's ship on Friday.\nBob: I'll write the release notes.\n"
CONTACTS = b"name,email\nAlice,alice@example.com\n"


def test_txt_and_csv_are_classified(tmp_path):
    out = intake_files([("standup.txt", TRANSCRIPT), ("team.csv", CONTACTS)], tmp_path)

    assert [(f.name, f.type) for f in out] == [("standup.txt", "transcript"), ("team.csv", "contacts")]
    assert out[0].content == TRANSCRIPT.decode()
    assert out[1].content == [{"name": "Alice", "email": "alice@example.com"}]


def test_unknown_extension_is_skipped(tmp_path):
    out = intake_files([("notes.pdf", b"%PDF-1.4"), ("standup.txt", TRANSCRIPT)], tmp_path)
    assert [f.type for f in out] == ["transcript"]


def test_extension_is_case_insensitive():
    assert classify("MINUTES.TXT") == "transcript"
    assert classify("People.Csv") == "contacts"
    assert classify("archive.txt.zip") is None
    assert classify("") is None


def test_files_are_stored_under_timestamped_names(tmp_path):
    out = intake_files([("standup.txt", TRANSCRIPT), ("standup.txt", b"second")], tmp_path)

    paths = [Path(f.stored_path) for f in out]
    assert all(p.exists() and p.parent == tmp_path for p in paths)
    assert paths[0] != paths[1]
    assert all(p.name.endswith("-standup.txt") for p in paths)
    assert out[1].content == "second"


def test_stored_name_drops_directories():
    assert stored_name("../../etc/passwd.txt", now_ms=1700000000000) == "1700000000000-passwd.txt"
    assert stored_name("C:\\Users\\me\\notes.txt", now_ms=5) == "5-notes.txt"


def test_stored_path_is_not_serialised(tmp_path):
    out = intake_files([("standup.txt", TRANSCRIPT)], tmp_path)
    assert "stored_path" not in out[0].model_dump()


def test_batch_over_cap_is_rejected(tmp_path):
    batch = [(f"t{i}.txt", b"x") for i in range(11)]
    with pytest.raises(UploadLimitError):
        intake_files(batch, tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_oversized_file_is_rejected(tmp_path):
    with pytest.raises(UploadLimitError):
        intake_files([("big.txt", b"x" * 11)], tmp_path, max_bytes=10)


def test_storage_failure_fails_whole_batch(tmp_path, monkeypatch):
    real_save = intake.save_upload
    calls = []

    def flaky_save(directory, name, data):
        calls.append(name)
        if len(calls) == 2:
            raise OSError("disk full")
        return real_save(directory, name, data)

    monkeypatch.setattr(intake, "save_upload", flaky_save)

    with pytest.raises(UploadError) as exc:
        intake_files([("a.txt", b"one"), ("b.txt", b"two")], tmp_path)

    assert "disk full" in str(exc.value)
    # the file written before the failure is cleaned up
    assert list(tmp_path.iterdir()) == []
