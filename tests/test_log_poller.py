from __future__ import annotations

from pathlib import Path

from zpresence.zwift.poller import LogPoller, split_new_lines


def test_split_new_lines_returns_appended_range() -> None:
    content = b"first\nsecond\nthird\n"
    lines, offset = split_new_lines(content, len(b"first\n"))
    assert lines == ["second", "third", ""]
    assert offset == len(content)


def test_split_new_lines_no_new_bytes() -> None:
    assert split_new_lines(b"abc\n", 4) == ([], 4)


def test_split_new_lines_truncated_file_keeps_offset() -> None:
    assert split_new_lines(b"abc", 10) == ([], 10)


def test_split_new_lines_counts_bytes_not_characters() -> None:
    content = "Makuri Islands ✓\nnext\n".encode("utf-8")
    lines, offset = split_new_lines(content, 0)
    assert lines[0] == "Makuri Islands ✓"
    assert offset == len(content)


def test_poller_reads_only_appended_lines(tmp_path: Path) -> None:
    log = tmp_path / "Log.txt"
    log.write_text("[10:00:00] one\n", encoding="utf-8")
    poller = LogPoller(log)

    assert poller.poll() == ["[10:00:00] one"]
    assert poller.poll() == []

    with log.open("a", encoding="utf-8") as handle:
        handle.write("[10:00:05] two\n")
    assert poller.poll() == ["[10:00:05] two"]
    assert poller.offset == log.stat().st_size


def test_poller_missing_file_keeps_offset(tmp_path: Path) -> None:
    poller = LogPoller(tmp_path / "missing.txt", offset=42)
    assert poller.poll() == []
    assert poller.offset == 42


def test_poller_reset_rereads_from_start(tmp_path: Path) -> None:
    log = tmp_path / "Log.txt"
    log.write_text("a\nb\n", encoding="utf-8")
    poller = LogPoller(log)
    poller.poll()

    poller.reset()
    assert poller.offset == 0
    assert poller.poll() == ["a", "b"]


def test_poller_holds_back_unterminated_line(tmp_path: Path) -> None:
    log = tmp_path / "Log.txt"
    marker = "[22:04:33] DEBUG LEVEL: [StructuredEvents] Sending PacePartnerLeft structured event"
    log.write_text("[22:04:30] ready\n" + marker[:40], encoding="utf-8")
    poller = LogPoller(log)

    assert poller.poll() == ["[22:04:30] ready"]
    assert poller.offset == log.stat().st_size

    with log.open("a", encoding="utf-8") as handle:
        handle.write(marker[40:] + " for D. Maria\n")
    assert poller.poll() == [marker + " for D. Maria"]
    assert poller.poll() == []


def test_poller_reset_drops_pending_fragment(tmp_path: Path) -> None:
    log = tmp_path / "Log.txt"
    log.write_text("a\npart", encoding="utf-8")
    poller = LogPoller(log)
    assert poller.poll() == ["a"]

    poller.reset()
    log.write_text("b\n", encoding="utf-8")
    assert poller.poll() == ["b"]
