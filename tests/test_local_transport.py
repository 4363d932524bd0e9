"""Testy lokalnego silnika skanującego."""

from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Any

import pytest

from file_scanner.core import FileMetadata, ScanCoordinator, ScanStatus, StartOutcome
from file_scanner.core.coordinator import TIMEOUT_MESSAGE
from file_scanner.transport import LocalScanTransport, ScanInvocationError
from file_scanner.transport import local
from file_scanner.transport.local import scan_directory


@pytest.fixture
def sample_dir(tmp_path: Path) -> Path:
    (tmp_path / "beta").mkdir()
    (tmp_path / "alpha").mkdir()
    (tmp_path / "b.txt").write_bytes(b"x" * 2048)
    (tmp_path / "a.txt").write_bytes(b"x" * 512)
    (tmp_path / "c.bin").write_bytes(b"")
    return tmp_path


def test_scan_directory_emits_sorted_batches_then_complete(sample_dir: Path) -> None:
    events: list[tuple[str, Any]] = []

    total = scan_directory(sample_dir, lambda name, payload: events.append((name, payload)), batch_size=2, progress_every=2)

    assert total == 5
    names = [name for name, _ in events]
    assert names == ["scan_progress", "scan_progress", "scan_batch", "scan_batch", "scan_batch", "scan_complete"]
    assert [payload for name, payload in events if name == "scan_progress"] == [2, 4]

    batches = [payload for name, payload in events if name == "scan_batch"]
    assert [len(batch) for batch in batches] == [2, 2, 1]
    entries = [entry for batch in batches for entry in batch]
    assert [entry["name"] for entry in entries] == ["alpha", "beta", "a.txt", "b.txt", "c.bin"]
    assert [entry["is_dir"] for entry in entries] == [True, True, False, False, False]
    assert entries[2]["size_kb"] == pytest.approx(0.5)
    assert entries[3]["size_kb"] == pytest.approx(2.0)
    assert entries[0]["size_kb"] == 0.0
    assert events[-1] == ("scan_complete", 5)


def test_scan_directory_empty_directory_only_completes(tmp_path: Path) -> None:
    events: list[tuple[str, Any]] = []

    scan_directory(tmp_path, lambda name, payload: events.append((name, payload)))

    assert events == [("scan_complete", 0)]


def test_scan_directory_rejects_missing_path(tmp_path: Path) -> None:
    with pytest.raises(ScanInvocationError, match="Unable to access directory"):
        scan_directory(tmp_path / "missing", lambda *_a: None)


def test_scan_directory_rejects_file(sample_dir: Path) -> None:
    with pytest.raises(ScanInvocationError, match="Selected path is not a directory."):
        scan_directory(sample_dir / "a.txt", lambda *_a: None)


def test_coordinator_with_local_transport_completes(sample_dir: Path) -> None:
    transport = LocalScanTransport(batch_size=2, progress_every=2)
    coordinator = ScanCoordinator(transport)

    outcome = asyncio.run(coordinator.start_scan(str(sample_dir)))

    assert outcome is StartOutcome.STARTED
    assert coordinator.status is ScanStatus.READY
    assert coordinator.scanned_count == 5
    assert coordinator.file_count == 3
    assert [entry.name for entry in coordinator.entries][:2] == ["alpha", "beta"]
    assert coordinator.elapsed_ms >= 0
    for event_name in ("scan_batch", "scan_progress", "scan_complete"):
        assert transport.handler_count(event_name) == 0


def test_coordinator_with_local_transport_reports_missing_directory(tmp_path: Path) -> None:
    coordinator = ScanCoordinator(LocalScanTransport())

    outcome = asyncio.run(coordinator.start_scan(str(tmp_path / "missing")))

    assert outcome is StartOutcome.FAILED
    assert coordinator.status is ScanStatus.READY
    assert coordinator.entries == ()
    assert (coordinator.notifications.message or "").startswith("Unable to access directory")


def test_subscription_release_detaches_handler() -> None:
    transport = LocalScanTransport()
    received: list[Any] = []

    async def scenario() -> None:
        subscription = await transport.subscribe("scan_progress", received.append)
        transport._deliver("scan_progress", 1)
        subscription.release()
        subscription.release()
        transport._deliver("scan_progress", 2)

    asyncio.run(scenario())

    assert received == [1]
    assert transport.handler_count("scan_progress") == 0


@pytest.mark.parametrize("kwargs", [{"batch_size": 0}, {"progress_every": -1}])
def test_rejects_invalid_settings(kwargs: dict[str, int]) -> None:
    with pytest.raises(ValueError):
        LocalScanTransport(**kwargs)


@pytest.fixture
def slow_scan(monkeypatch: pytest.MonkeyPatch) -> None:
    """Spowalnia skan katalogów o nazwie ``slow`` o 0,4 s."""

    original = local.scan_directory

    def delayed(path: Path, emit, **kwargs: Any) -> int:
        if path.name == "slow":
            time.sleep(0.4)
        return original(path, emit, **kwargs)

    monkeypatch.setattr(local, "scan_directory", delayed)


def test_batches_are_delivered_as_records_to_coordinator(sample_dir: Path) -> None:
    coordinator = ScanCoordinator(LocalScanTransport(batch_size=2))

    asyncio.run(coordinator.start_scan(str(sample_dir)))

    assert all(isinstance(entry, FileMetadata) for entry in coordinator.entries)
    assert coordinator.directory_count == 2
    assert coordinator.entries[2] == FileMetadata("a.txt", False, 0.5)


def test_session_timeout_fires_while_engine_is_running(tmp_path: Path, slow_scan: None) -> None:
    slow_dir = tmp_path / "slow"
    slow_dir.mkdir()
    (slow_dir / "late.txt").write_bytes(b"x")
    coordinator = ScanCoordinator(LocalScanTransport(), session_timeout=0.05)
    observed: dict[str, object] = {}

    async def scenario() -> StartOutcome:
        task = asyncio.ensure_future(coordinator.start_scan(str(slow_dir)))
        await asyncio.sleep(0.2)
        observed["status"] = coordinator.status
        observed["message"] = coordinator.notifications.message
        return await task

    outcome = asyncio.run(scenario())

    assert observed == {"status": ScanStatus.READY, "message": TIMEOUT_MESSAGE}
    assert outcome is StartOutcome.STARTED
    assert coordinator.entries == ()
    assert coordinator.notifications.message == TIMEOUT_MESSAGE


def test_abandoned_run_does_not_reach_later_subscribers(tmp_path: Path, slow_scan: None) -> None:
    slow_dir = tmp_path / "slow"
    slow_dir.mkdir()
    (slow_dir / "stale.txt").write_bytes(b"x")
    transport = LocalScanTransport()
    first_seen: list[Any] = []
    later_seen: list[Any] = []

    async def scenario() -> None:
        first = await transport.subscribe("scan_batch", first_seen.append)
        run = asyncio.ensure_future(transport.invoke_scan(str(slow_dir)))
        await asyncio.sleep(0.05)
        first.release()
        await transport.subscribe("scan_batch", later_seen.append)
        await run

    asyncio.run(scenario())

    assert first_seen == []
    assert later_seen == []
    assert transport.handler_count("scan_batch") == 1
