"""Tests for handlers layer."""

import csv
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from device_backfill.handlers.backfill import BackfillRunner, run_backfill
from device_backfill.infrastructure.csv_record_source import CsvRecordSource
from device_backfill.infrastructure.dynamodb_client import DynamoDBClient
from device_backfill.models.record_source import RecordSourceError
from device_backfill.models.schemas import ClassifiedRecord, UpdateOutcome
from device_backfill.services.device_updater import DeviceNotFoundError, DeviceUpdater

# 3 Mac, 2 Windows, 1 unknown sourceApp, 1 empty suid, 1 duplicate zid
SCENARIO_ROWS = [
    {"suid": "s1", "zid": "z1", "sourceApp": "Desktop Agent macOS 14.1"},
    {"suid": "s2", "zid": "z2", "sourceApp": "Desktop Agent Windows 10"},
    {"suid": "s3", "zid": "z3", "sourceApp": "MacBook agent"},
    {"suid": "s4", "zid": "z4", "sourceApp": "Linux agent"},
    {"suid": "", "zid": "z5", "sourceApp": "Desktop Agent macOS"},
    {"suid": "s6", "zid": "z6", "sourceApp": "windows-x64"},
    {"suid": "s1", "zid": "z1", "sourceApp": "Desktop Agent macOS 14.2"},
    {"suid": "s7", "zid": "z7", "sourceApp": "mac arm64"},
]


def write_csv(path, rows):
    """Helper to create a login-events CSV."""
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=["suid", "zid", "sourceApp"])
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    return path


def make_updater(side_effect=None) -> MagicMock:
    updater = MagicMock(spec=DeviceUpdater)
    updater.table_name = "test-user"
    updater.update_device.return_value = UpdateOutcome.UPDATED
    updater.update_device.side_effect = side_effect
    return updater


class TestBackfillRunner:
    """Tests for BackfillRunner."""

    def test_scenario_summary(self, tmp_path):
        """Test the mixed scenario yields one outcome per row."""
        source = CsvRecordSource(write_csv(tmp_path / "events.csv", SCENARIO_ROWS))
        updater = make_updater()

        summary = BackfillRunner(source, updater, window_size=2).run()

        assert summary.processed == 8
        assert summary.updated == 5
        assert summary.failed == 0
        assert summary.skipped_invalid == 1
        assert summary.skipped_no_os_match == 1
        assert summary.skipped_already_processed == 1
        assert summary.devices_marked == 5
        assert summary.processed == summary.updated + summary.failed + summary.skipped

    def test_update_calls_for_eligible_rows_only(self, tmp_path):
        """Test only validated, classified, first-seen devices reach the store."""
        source = CsvRecordSource(write_csv(tmp_path / "events.csv", SCENARIO_ROWS))
        updater = make_updater()

        BackfillRunner(source, updater, window_size=3).run()

        records = [c.args[0] for c in updater.update_device.call_args_list]
        assert sorted((r.zid, r.os_tag) for r in records) == [
            ("z1", "Mac"),
            ("z2", "Windows"),
            ("z3", "Mac"),
            ("z6", "Windows"),
            ("z7", "Mac"),
        ]
        first_z1 = next(r for r in records if r.zid == "z1")
        assert first_z1 == ClassifiedRecord(suid="s1", zid="z1", os_tag="Mac")

    def test_single_failure_is_isolated(self, tmp_path):
        """Test one failed update is counted and the rest still complete."""
        source = CsvRecordSource(write_csv(tmp_path / "events.csv", SCENARIO_ROWS))

        def update(record):
            if record.zid == "z3":
                raise ClientError({"Error": {"Code": "ThrottlingException"}}, "UpdateItem")
            return UpdateOutcome.UPDATED

        updater = make_updater(side_effect=update)

        summary = BackfillRunner(source, updater, window_size=2).run()

        assert summary.updated == 4
        assert summary.failed == 1
        assert len(updater.update_device.call_args_list) == 5

    def test_duplicate_after_failure_is_not_retried(self, tmp_path):
        """Test a device whose first update failed is still skipped later."""
        rows = [
            {"suid": "s1", "zid": "z1", "sourceApp": "mac"},
            {"suid": "s2", "zid": "z2", "sourceApp": "mac"},
            {"suid": "s1", "zid": "z1", "sourceApp": "mac"},
        ]
        source = CsvRecordSource(write_csv(tmp_path / "events.csv", rows))

        def update(record):
            if record.zid == "z1":
                raise ClientError({"Error": {"Code": "InternalServerError"}}, "UpdateItem")
            return UpdateOutcome.UPDATED

        updater = make_updater(side_effect=update)

        summary = BackfillRunner(source, updater, window_size=1).run()

        assert summary.failed == 1
        assert summary.updated == 1
        assert summary.skipped_already_processed == 1
        assert len(updater.update_device.call_args_list) == 2

    def test_missing_device_counted_as_not_found(self, tmp_path):
        """Test a device absent from the table is skipped, not failed."""
        rows = [{"suid": "s1", "zid": "z1", "sourceApp": "windows"}]
        source = CsvRecordSource(write_csv(tmp_path / "events.csv", rows))
        updater = make_updater(side_effect=DeviceNotFoundError("missing"))

        summary = BackfillRunner(source, updater).run()

        assert summary.skipped_not_found == 1
        assert summary.failed == 0

    def test_unreadable_source_aborts_before_updates(self, tmp_path):
        """Test a missing input file raises before any store call."""
        source = CsvRecordSource(tmp_path / "missing.csv")
        updater = make_updater()

        with pytest.raises(RecordSourceError):
            BackfillRunner(source, updater).run()

        updater.update_device.assert_not_called()

    def test_runs_do_not_share_state(self, tmp_path):
        """Test each runner starts with an empty dedup set."""
        rows = [{"suid": "s1", "zid": "z1", "sourceApp": "mac"}]
        path = write_csv(tmp_path / "events.csv", rows)

        first = BackfillRunner(CsvRecordSource(path), make_updater()).run()
        second = BackfillRunner(CsvRecordSource(path), make_updater()).run()

        assert first.updated == 1
        assert second.updated == 1

    def test_dry_run_counts_no_updates(self, tmp_path):
        """Test a dry run reports would-be updates separately and writes nothing."""
        rows = [
            {"suid": "s1", "zid": "z1", "sourceApp": "mac"},
            {"suid": "s2", "zid": "z2", "sourceApp": "windows"},
        ]
        source = CsvRecordSource(write_csv(tmp_path / "events.csv", rows))
        mock_dynamodb_client = MagicMock(spec=DynamoDBClient)
        updater = DeviceUpdater(mock_dynamodb_client, table_name="qa-user", dry_run=True)

        summary = BackfillRunner(source, updater).run()

        assert summary.updated == 0
        assert summary.skipped_dry_run == 2
        assert summary.devices_marked == 2
        assert summary.processed == summary.updated + summary.failed + summary.skipped
        mock_dynamodb_client.update_item.assert_not_called()


class TestRunBackfill:
    """Tests for run_backfill."""

    def test_logs_summary(self, tmp_path, caplog):
        """Test the final report is logged."""
        source = CsvRecordSource(write_csv(tmp_path / "events.csv", SCENARIO_ROWS))

        with caplog.at_level("INFO"):
            summary = run_backfill(source, make_updater(), window_size=4)

        assert summary.updated == 5
        assert "Process summary:" in caplog.text
        assert "Total records updated: 5" in caplog.text
