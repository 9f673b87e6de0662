import json
import logging

from deal_analytics.shared.infrastructure.logging import (
    CustomJsonFormatter, get_context_logger, log_latency,
)


def _format(record_extra):
    formatter = CustomJsonFormatter(
        "%(name)s %(levelname)s %(message)s", environment="staging", service="deal-sla-analytics"
    )
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in record_extra.items():
        setattr(record, key, value)
    return json.loads(formatter.format(record))


def test_formatter_adds_service_context():
    data = _format({"correlation_id": "abc"})

    assert data["message"] == "hello"
    assert data["environment"] == "staging"
    assert data["service"] == "deal-sla-analytics"
    assert data["correlation_id"] == "abc"
    assert "timestamp" in data


def test_formatter_redacts_credentials():
    data = _format({"webhook_url": "https://crm.example/rest/1/secret-token/", "deals": 3})

    assert data["webhook_url"] == "***REDACTED***"
    assert data["deals"] == 3


def test_log_latency_records_operation(caplog):
    logger = logging.getLogger("deal_analytics.tests")

    with caplog.at_level(logging.INFO, logger="deal_analytics.tests"):
        with log_latency(logger, "sla_summary", deals=4):
            pass

    record = caplog.records[-1]
    assert record.operation == "sla_summary"
    assert record.deals == 4
    assert record.latency_ms >= 0


def test_context_logger_carries_correlation_id(caplog):
    adapter = get_context_logger("deal_analytics.tests", "req-1")

    with caplog.at_level(logging.INFO, logger="deal_analytics.tests"):
        adapter.info("processing")

    assert caplog.records[-1].correlation_id == "req-1"
