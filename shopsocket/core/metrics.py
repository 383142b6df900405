import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class ConnectionMetrics:
    """Simple metrics collection for a WebSocket connection."""

    # Traffic
    messages_sent: int = 0
    messages_received: int = 0
    heartbeats_sent: int = 0

    # Connection lifecycle
    connections_opened: int = 0
    reconnect_attempts: int = 0

    # Timing
    start_time: float = field(default_factory=time.time)
    last_report_time: float = field(default_factory=time.time)

    # Errors
    error_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_sent(self, count: int = 1):
        """Record sent messages."""
        self.messages_sent += count

    def record_received(self, count: int = 1):
        """Record received messages."""
        self.messages_received += count

    def record_heartbeat(self):
        self.heartbeats_sent += 1

    def record_connection(self):
        self.connections_opened += 1

    def record_reconnect_attempt(self):
        self.reconnect_attempts += 1

    def record_error(self, error_type: str):
        """Record an error."""
        self.error_counts[error_type] += 1

    def get_message_rate(self, interval: Optional[float] = None) -> Dict[str, float]:
        """Get message rates per second."""
        if interval is None:
            interval = time.time() - self.start_time

        if interval <= 0:
            return {"sent_per_second": 0, "received_per_second": 0}

        return {
            "sent_per_second": self.messages_sent / interval,
            "received_per_second": self.messages_received / interval,
        }

    def report(self) -> Dict[str, Any]:
        """Generate a metrics report."""
        interval = time.time() - self.last_report_time
        rates = self.get_message_rate(interval)

        report = {
            "timestamp": time.time(),
            "messages_sent": self.messages_sent,
            "messages_received": self.messages_received,
            "heartbeats_sent": self.heartbeats_sent,
            "connections_opened": self.connections_opened,
            "reconnect_attempts": self.reconnect_attempts,
            "message_rates": rates,
            "error_counts": dict(self.error_counts),
        }

        self.last_report_time = time.time()
        return report

    def log_summary(self):
        """Log a summary of metrics."""
        report = self.report()

        logger.info(
            f"Metrics Summary: "
            f"Sent: {self.messages_sent}, "
            f"Received: {self.messages_received}, "
            f"Heartbeats: {self.heartbeats_sent}, "
            f"Connections: {self.connections_opened}, "
            f"Reconnect attempts: {self.reconnect_attempts}, "
            f"Rate: {report['message_rates']['received_per_second']:.1f} msgs/sec"
        )

        if self.error_counts:
            for error_type, count in self.error_counts.items():
                logger.warning(f"Error '{error_type}': {count} occurrences")
