"""
Tunables Metrics Client

Thin wrapper around prometheus_client for the sysctl tool.
Counts reads, writes and preload lines per outcome and pushes them to a
Prometheus Push Gateway at the end of a run.

Dependencies:
    pip install prometheus_client

Usage:
    from kernel_tunables.metrics_client import TunablesMetricsClient

    metrics = TunablesMetricsClient(command='write')
    metrics.inc_write('success')
    metrics.push()
"""

import os
import time
import socket
import logging
from typing import Optional
from prometheus_client import CollectorRegistry, Gauge, Counter, push_to_gateway

logger = logging.getLogger(__name__)


class TunablesMetricsClient:
    """
    Prometheus metrics client for one sysctl invocation.

    Disabled unless SYSCTL_PUSH_METRICS_ENABLED=true; a disabled client
    accepts every call and does nothing.
    """

    def __init__(self, command: str, instance: Optional[str] = None,
                 pushgateway_url: Optional[str] = None, enabled: Optional[bool] = None):
        """
        Initialize metrics client for one command run.

        Args:
            command: Mode of the run ('read', 'write', 'all', 'preload')
            instance: Grouping label (default: hostname)
            pushgateway_url: Push Gateway URL (default from env or http://pushgateway:9091)
            enabled: Override for SYSCTL_PUSH_METRICS_ENABLED
        """
        self.command = command
        self.instance = instance or socket.gethostname()

        if enabled is None:
            enabled = os.getenv("SYSCTL_PUSH_METRICS_ENABLED", "false").lower() == "true"
        self.enabled = enabled
        self.pushgateway_url = pushgateway_url or os.getenv("PUSH_GATEWAY_URL", "http://pushgateway:9091")

        if not self.enabled:
            logger.debug("Prometheus metrics pushing disabled via SYSCTL_PUSH_METRICS_ENABLED")
            return

        self.registry = CollectorRegistry()
        self._init_metrics()

        logger.debug(f"Initialized {self.__class__.__name__} for {self.command}@{self.instance}")

    def _init_metrics(self):
        """Initialize Prometheus metrics"""
        self._reads = Counter(
            'kernel_tunables_reads_total',
            'Tunable reads by outcome',
            ['command', 'status'],
            registry=self.registry
        )

        self._writes = Counter(
            'kernel_tunables_writes_total',
            'Tunable writes by outcome',
            ['command', 'status'],
            registry=self.registry
        )

        # Preload outcomes: applied, failed, skipped, invalid
        self._preload_lines = Counter(
            'kernel_tunables_preload_lines_total',
            'Preload source lines by outcome',
            ['command', 'outcome'],
            registry=self.registry
        )

        self._last_run = Gauge(
            'kernel_tunables_last_run_timestamp_seconds',
            'Unix time of the last pushed run',
            ['command'],
            registry=self.registry
        )

    def push(self) -> bool:
        """
        Push all metrics to Push Gateway.

        Returns:
            True if push succeeded, False otherwise
        """
        if not self.enabled:
            return False

        self._last_run.labels(command=self.command).set(time.time())

        try:
            push_to_gateway(
                self.pushgateway_url,
                job='kernel_tunables',
                grouping_key={'instance': self.instance},
                registry=self.registry
            )
            logger.debug(f"Pushed metrics to {self.pushgateway_url}")
            return True
        except Exception as e:
            logger.warning(f"Failed to push metrics to {self.pushgateway_url}: {e}")
            return False

    def inc_read(self, status: str):
        """
        Increment read counter.

        Args:
            status: 'success' or an error classification from kernel_tunables.errors
        """
        if not self.enabled:
            return
        self._reads.labels(command=self.command, status=status).inc()

    def inc_write(self, status: str):
        """
        Increment write counter.

        Args:
            status: 'success' or an error classification from kernel_tunables.errors
        """
        if not self.enabled:
            return
        self._writes.labels(command=self.command, status=status).inc()

    def inc_preload_line(self, outcome: str):
        """Increment preload line counter"""
        if not self.enabled:
            return
        self._preload_lines.labels(command=self.command, outcome=outcome).inc()
