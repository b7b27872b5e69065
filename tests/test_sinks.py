"""Tests for output sinks."""

import json
import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from tenancy_engine.config import KafkaConfig
from tenancy_engine.exceptions import SinkError
from tenancy_engine.models import (
    ChargeLine,
    CommunalCalculation,
    Decision,
    NoticeStatus,
    SettlementResult,
)
from tenancy_engine.sinks import ConsoleSink, JsonFileSink
from tenancy_engine.sinks.console import describe
from tenancy_engine.sinks.kafka import KafkaSink, ProducerStats


@pytest.fixture
def settlement_result() -> SettlementResult:
    return SettlementResult(
        decision=Decision.REFUND,
        refundable_amount=Decimal("130.00"),
        total_debt=Decimal("120.00"),
        confirmed_charges=Decimal("50.00"),
        notice_days=31,
        notice_status=NoticeStatus.ADEQUATE,
        refund_deadline=date(2024, 1, 22),
        tenancy_id="ten-001",
    )


@pytest.fixture
def calculation() -> CommunalCalculation:
    return CommunalCalculation(
        apartment_id="apt-001",
        period="2024-02",
        lines=[
            ChargeLine(
                meter_id="m1",
                current=Decimal("49"),
                previous=Decimal("45"),
                consumption=Decimal("4"),
                unit_price=Decimal("1.32"),
                total=Decimal("5.28"),
            )
        ],
        fixed_charges=Decimal("15.00"),
        variable_charges=Decimal("5.28"),
        total_amount=Decimal("20.28"),
    )


class TestConsoleSink:
    """Tests for ConsoleSink."""

    def test_init_default(self) -> None:
        sink = ConsoleSink()

        assert sink.summary is True
        assert sink.max_records is None

    def test_settlement_summary_line(
        self, capsys: pytest.CaptureFixture, settlement_result: SettlementResult
    ) -> None:
        sink = ConsoleSink()

        sink.write_batch("settlements", [settlement_result])

        out = capsys.readouterr().out
        assert "settlements (1 records)" in out
        assert "ten-001  REFUND   refundable 130.00" in out
        assert "due" not in out

    def test_blocked_settlement_line(self) -> None:
        result = SettlementResult(
            decision=Decision.BLOCKED,
            refundable_amount=None,
            blocking_reasons=["required meters unresolved", "2024-03: pending Electricity"],
            tenancy_id="ten-002",
        )

        assert describe(result) == (
            "ten-002  BLOCKED  refundable -"
            "  (required meters unresolved; 2024-03: pending Electricity)"
        )

    def test_invoice_line_shows_amount_due(self) -> None:
        result = SettlementResult(
            decision=Decision.INVOICE,
            refundable_amount=Decimal("-150.00"),
            additional_due=Decimal("150.00"),
            notice_deduction=Decimal("400.00"),
            tenancy_id="ten-003",
        )

        assert describe(result) == (
            "ten-003  INVOICE  refundable -150.00  due 150.00  notice deduction 400.00"
        )

    def test_calculation_line(self, calculation: CommunalCalculation) -> None:
        assert describe(calculation) == "apt-001  February 2024  total 20.28 (1 lines)"

    def test_json_mode(
        self, capsys: pytest.CaptureFixture, settlement_result: SettlementResult
    ) -> None:
        sink = ConsoleSink(summary=False)

        sink.write_batch("settlements", [settlement_result])

        out = capsys.readouterr().out
        assert '"refundable_amount": "130.00"' in out
        assert '"decision": "REFUND"' in out

    def test_write_batch_with_max_records(self, capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink(max_records=2)

        sink.write_batch("test", [{"id": i} for i in range(5)])

        out = capsys.readouterr().out
        assert '{"id": 0}' in out
        assert "... and 3 more records" in out

    def test_close(
        self, capsys: pytest.CaptureFixture, settlement_result: SettlementResult
    ) -> None:
        blocked = SettlementResult(decision=Decision.BLOCKED, refundable_amount=None)
        sink = ConsoleSink()
        sink.write_batch("settlements", [settlement_result])
        sink.write_batch("settlements", [blocked, settlement_result])

        sink.close()

        out = capsys.readouterr().out
        assert "settlements: 3 records" in out
        assert "decisions: BLOCKED=1, REFUND=2" in out


class TestJsonFileSink:
    """Tests for JsonFileSink."""

    def test_init_creates_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            output_dir = Path(tmpdir) / "new_subdir"
            sink = JsonFileSink(output_dir)

            assert output_dir.exists()
            assert sink.pretty is False

    def test_write_batch_calculation(self, calculation: CommunalCalculation) -> None:
        """Test nested charge lines are written as plain JSON."""
        with tempfile.TemporaryDirectory() as tmpdir:
            sink = JsonFileSink(tmpdir, pretty=True)

            sink.write_batch("communal-calculations", [calculation])

            with open(Path(tmpdir) / "communal-calculations.json") as f:
                data = json.load(f)

            assert data[0]["apartment_id"] == "apt-001"
            assert data[0]["total_amount"] == "20.28"
            assert data[0]["lines"][0]["total"] == "5.28"
            assert data[0]["lines"][0]["shared"] is False

    def test_write_batch_unwritable(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            sink = JsonFileSink(tmpdir)
            (Path(tmpdir) / "settlements.json").mkdir()

            with pytest.raises(SinkError, match="Cannot write"):
                sink.write_batch("settlements", [{"id": 1}])

    def test_close(self, capsys: pytest.CaptureFixture) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            sink = JsonFileSink(tmpdir)
            sink.write_batch("settlements", [{"id": 1}, {"id": 2}])

            sink.close()

            assert "settlements: 2 records" in capsys.readouterr().out


class TestKafkaSinkMocked:
    """Tests for KafkaSink with a mocked producer."""

    def test_producer_stats(self) -> None:
        stats = ProducerStats(sent=10, delivered=8, failed=2, start_time=0.0, end_time=2.0)

        assert stats.success_rate == 0.8
        assert stats.throughput == 5.0
        assert ProducerStats().success_rate == 0.0
        assert ProducerStats(sent=5, start_time=1.0, end_time=1.0).throughput == 0.0

    @patch("tenancy_engine.sinks.kafka.Producer")
    def test_init_with_string(self, mock_producer_class: MagicMock) -> None:
        sink = KafkaSink("kafka:9092")

        assert sink.config.bootstrap_servers == "kafka:9092"
        mock_producer_class.assert_called_once()
        assert mock_producer_class.call_args[0][0]["bootstrap.servers"] == "kafka:9092"

    @patch("tenancy_engine.sinks.kafka.Producer")
    def test_topic_for(self, mock_producer_class: MagicMock) -> None:
        sink = KafkaSink(KafkaConfig(topic_prefix="prod.tenancy"))

        assert sink.topic_for("settlements") == "prod.tenancy.settlements"

    @patch("tenancy_engine.sinks.kafka.Producer")
    def test_write_batch_keys_by_tenancy(
        self, mock_producer_class: MagicMock, settlement_result: SettlementResult
    ) -> None:
        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink("localhost:9092")
        sink.write_batch("settlements", [settlement_result])

        call_kwargs = mock_producer.produce.call_args[1]
        assert call_kwargs["topic"] == "dev.tenancy.settlements"
        assert call_kwargs["key"] == b"ten-001"
        assert json.loads(call_kwargs["value"])["refundable_amount"] == "130.00"
        mock_producer.flush.assert_called_once()
        assert sink.stats.sent == 1

    @patch("tenancy_engine.sinks.kafka.Producer")
    def test_write_batch_keys_by_apartment(
        self, mock_producer_class: MagicMock, calculation: CommunalCalculation
    ) -> None:
        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink("localhost:9092")
        sink.write_batch("communal-calculations", [calculation])

        assert mock_producer.produce.call_args[1]["key"] == b"apt-001"

    @patch("tenancy_engine.sinks.kafka.Producer")
    def test_send_without_key(self, mock_producer_class: MagicMock) -> None:
        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink("localhost:9092")
        sink.send("dev.tenancy.other", {"id": 1})

        assert mock_producer.produce.call_args[1]["key"] is None

    @patch("tenancy_engine.sinks.kafka.Producer")
    def test_delivery_callback(self, mock_producer_class: MagicMock) -> None:
        sink = KafkaSink("localhost:9092")
        mock_msg = MagicMock()
        mock_msg.topic.return_value = "dev.tenancy.settlements"
        mock_msg.partition.return_value = 0
        mock_msg.offset.return_value = 1

        sink._delivery_callback(None, mock_msg)
        sink._delivery_callback("Connection error", None)

        assert sink.stats.delivered == 1
        assert sink.stats.failed == 1

    @patch("tenancy_engine.sinks.kafka.Producer")
    def test_close_flushes(self, mock_producer_class: MagicMock) -> None:
        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink("localhost:9092")
        sink.close()

        mock_producer.flush.assert_called_once_with(30.0)
