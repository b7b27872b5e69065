"""Configuration management for tenancy-engine."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from tenancy_engine.exceptions import ConfigurationError


@dataclass
class SettlementConfig:
    """Deposit settlement parameters.

    ``daily_late_rate`` has no default: call sites historically disagreed on
    the amount, so every deployment has to state it explicitly.
    """

    daily_late_rate: Decimal
    min_notice_days: int = 30
    refund_deadline_days: int = 14

    def __post_init__(self) -> None:
        if self.daily_late_rate is None:
            raise ConfigurationError("daily_late_rate must be configured")
        self.daily_late_rate = Decimal(str(self.daily_late_rate))
        if self.daily_late_rate < 0:
            raise ConfigurationError(f"daily_late_rate must be >= 0, got {self.daily_late_rate}")
        if self.min_notice_days < 0:
            raise ConfigurationError(f"min_notice_days must be >= 0, got {self.min_notice_days}")
        if self.refund_deadline_days < 0:
            raise ConfigurationError(
                f"refund_deadline_days must be >= 0, got {self.refund_deadline_days}"
            )


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    topic_prefix: str = "dev.tenancy"

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class BatchConfig:
    """Batch execution configuration."""

    workers: int = 1
    chunksize: int = 16


@dataclass
class EngineConfig:
    """Main configuration for tenancy-engine."""

    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
    settlement: SettlementConfig | None = None
    seed: int | None = None
    log_level: str = "INFO"

    def require_settlement(self) -> SettlementConfig:
        """Return the settlement config, failing when it was never provided."""
        if self.settlement is None:
            raise ConfigurationError(
                "Settlement configuration missing: set DAILY_LATE_RATE or pass SettlementConfig"
            )
        return self.settlement

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        import os

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            topic_prefix=os.getenv("TOPIC_PREFIX", "dev.tenancy"),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        batch = BatchConfig(workers=int(os.getenv("BATCH_WORKERS", "1")))

        settlement = None
        rate_str = os.getenv("DAILY_LATE_RATE")
        if rate_str:
            try:
                rate = Decimal(rate_str)
            except InvalidOperation as exc:
                raise ConfigurationError(f"DAILY_LATE_RATE is not a number: {rate_str!r}") from exc
            settlement = SettlementConfig(
                daily_late_rate=rate,
                min_notice_days=int(os.getenv("MIN_NOTICE_DAYS", "30")),
                refund_deadline_days=int(os.getenv("REFUND_DEADLINE_DAYS", "14")),
            )

        return cls(
            kafka=kafka,
            output=output,
            batch=batch,
            settlement=settlement,
            seed=int(os.getenv("SEED")) if os.getenv("SEED") else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
