"""Tests for config and logging."""

import json
import logging
import os
import sys
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from tenancy_engine.config import (
    BatchConfig,
    EngineConfig,
    KafkaConfig,
    OutputConfig,
    SettlementConfig,
)
from tenancy_engine.exceptions import ConfigurationError
from tenancy_engine.logging import (
    ContextFilter,
    JsonFormatter,
    get_logger,
    record_context,
    setup_logging,
)


class TestSettlementConfig:
    """Tests for SettlementConfig."""

    def test_defaults(self) -> None:
        config = SettlementConfig(daily_late_rate=Decimal("25"))

        assert config.min_notice_days == 30
        assert config.refund_deadline_days == 14

    def test_rate_coerced_to_decimal(self) -> None:
        config = SettlementConfig(daily_late_rate=50)

        assert config.daily_late_rate == Decimal("50")
        assert isinstance(config.daily_late_rate, Decimal)

    def test_rate_has_no_default(self) -> None:
        with pytest.raises(TypeError):
            SettlementConfig()  # type: ignore[call-arg]

    def test_rate_none_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="daily_late_rate"):
            SettlementConfig(daily_late_rate=None)  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"daily_late_rate": Decimal("-1")},
            {"daily_late_rate": Decimal("25"), "min_notice_days": -1},
            {"daily_late_rate": Decimal("25"), "refund_deadline_days": -1},
        ],
    )
    def test_negative_values_rejected(self, kwargs: dict) -> None:
        with pytest.raises(ConfigurationError):
            SettlementConfig(**kwargs)


class TestKafkaConfig:
    """Tests for KafkaConfig."""

    def test_default_values(self) -> None:
        config = KafkaConfig()

        assert config.bootstrap_servers == "localhost:9092"
        assert config.acks == "all"
        assert config.topic_prefix == "dev.tenancy"

    def test_to_dict(self) -> None:
        """Test conversion to confluent-kafka config dict."""
        result = KafkaConfig(bootstrap_servers="kafka:9092", compression="gzip").to_dict()

        assert result["bootstrap.servers"] == "kafka:9092"
        assert result["compression.type"] == "gzip"
        assert result["batch.size"] == 16384
        assert "topic_prefix" not in result


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_default_values(self) -> None:
        config = EngineConfig()

        assert config.output == OutputConfig()
        assert config.output.json_output_dir == Path("output")
        assert config.batch == BatchConfig(workers=1, chunksize=16)
        assert config.settlement is None
        assert config.log_level == "INFO"

    def test_require_settlement_missing(self) -> None:
        with pytest.raises(ConfigurationError, match="DAILY_LATE_RATE"):
            EngineConfig().require_settlement()

    def test_require_settlement_present(self) -> None:
        settlement = SettlementConfig(daily_late_rate=Decimal("25"))

        assert EngineConfig(settlement=settlement).require_settlement() is settlement

    def test_from_env_default(self) -> None:
        """Test creating config from an empty environment."""
        with patch.dict(os.environ, {}, clear=True):
            config = EngineConfig.from_env()

        assert config.kafka.bootstrap_servers == "localhost:9092"
        assert config.settlement is None
        assert config.seed is None
        assert config.batch.workers == 1

    def test_from_env_custom(self) -> None:
        """Test creating config from custom environment variables."""
        env_vars = {
            "KAFKA_BOOTSTRAP_SERVERS": "kafka-cluster:9092",
            "TOPIC_PREFIX": "prod.tenancy",
            "OUTPUT_DIR": "/tmp/settlements",
            "PRETTY_JSON": "true",
            "BATCH_WORKERS": "4",
            "DAILY_LATE_RATE": "50",
            "MIN_NOTICE_DAYS": "60",
            "REFUND_DEADLINE_DAYS": "30",
            "SEED": "42",
            "LOG_LEVEL": "DEBUG",
        }

        with patch.dict(os.environ, env_vars, clear=True):
            config = EngineConfig.from_env()

        assert config.kafka.bootstrap_servers == "kafka-cluster:9092"
        assert config.kafka.topic_prefix == "prod.tenancy"
        assert config.output.json_output_dir == Path("/tmp/settlements")
        assert config.output.pretty_json is True
        assert config.batch.workers == 4
        assert config.settlement == SettlementConfig(
            daily_late_rate=Decimal("50"), min_notice_days=60, refund_deadline_days=30
        )
        assert config.seed == 42
        assert config.log_level == "DEBUG"

    def test_from_env_bad_rate(self) -> None:
        with patch.dict(os.environ, {"DAILY_LATE_RATE": "twenty-five"}, clear=True):
            with pytest.raises(ConfigurationError, match="not a number"):
                EngineConfig.from_env()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default(self) -> None:
        setup_logging()

        assert logging.getLogger("tenancy_engine").level == logging.INFO

    def test_setup_logging_debug(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_invalid_level(self) -> None:
        """Test logging with invalid level defaults to INFO."""
        setup_logging(level="INVALID")

        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_json_format(self) -> None:
        setup_logging(format_type="json")

        assert any(isinstance(h.formatter, JsonFormatter) for h in logging.getLogger().handlers)

    def test_setup_logging_replaces_handlers(self) -> None:
        logger = logging.getLogger()
        logger.addHandler(logging.StreamHandler())
        logger.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(logger.handlers) == 1

    def test_external_loggers_quieted(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger("confluent_kafka").level == logging.WARNING
        assert logging.getLogger("faker").level == logging.WARNING


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def _record(self, **kwargs) -> logging.LogRecord:
        defaults = dict(
            name="tenancy_engine.settlement.deposit",
            level=logging.INFO,
            pathname="/path/to/file.py",
            lineno=42,
            msg="Settlement blocked: %s",
            args=("policy forbids debt offset",),
            exc_info=None,
        )
        defaults.update(kwargs)
        return logging.LogRecord(**defaults)

    def test_format_basic(self) -> None:
        data = json.loads(JsonFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "tenancy_engine.settlement.deposit"
        assert data["message"] == "Settlement blocked: policy forbids debt offset"
        assert "timestamp" in data

    def test_format_with_exception(self) -> None:
        try:
            raise ConfigurationError("Settlement configuration missing")
        except ConfigurationError:
            exc_info = sys.exc_info()

        data = json.loads(JsonFormatter().format(self._record(level=logging.ERROR, exc_info=exc_info)))

        assert data["level"] == "ERROR"
        assert "ConfigurationError" in data["exception"]

    def test_format_with_context(self) -> None:
        record = self._record()
        record.tenancy_id = "ten-001"
        record.period = "2024-02"
        record.refundable = Decimal("130.00")

        data = json.loads(JsonFormatter().format(record))

        assert data["tenancy_id"] == "ten-001"
        assert data["period"] == "2024-02"
        assert "refundable" not in data

    def test_context_from_logger_extra(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("tenancy_engine.test")

        with caplog.at_level(logging.INFO, logger="tenancy_engine.test"):
            logger.info("Settled", extra={"tenancy_id": "ten-001", "decision": "REFUND"})

        data = json.loads(JsonFormatter().format(caplog.records[0]))
        assert data["decision"] == "REFUND"


class TestContextFilter:
    """Tests for ContextFilter."""

    def test_renders_context_suffix(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "Settled", None, None)
        record.tenancy_id = "ten-001"
        record.period = "2024-02"

        assert ContextFilter().filter(record) is True
        assert record.context == " [tenancy_id=ten-001 period=2024-02]"

    def test_no_context_renders_empty(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "Settled", None, None)

        ContextFilter().filter(record)

        assert record.context == ""
        assert record_context(record) == {}

    def test_standard_format_includes_context(self) -> None:
        setup_logging()
        handler = logging.getLogger().handlers[0]
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "Settlement blocked", None, None)
        record.tenancy_id = "ten-009"

        handler.filter(record)

        assert handler.format(record).endswith("Settlement blocked [tenancy_id=ten-009]")


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger(self) -> None:
        logger = get_logger("tenancy_engine.batch")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "tenancy_engine.batch"
        assert get_logger("tenancy_engine.batch") is logger


class TestPackageInit:
    """Tests for tenancy_engine __init__.py."""

    def test_version_exported(self) -> None:
        from tenancy_engine import __version__

        assert isinstance(__version__, str)
