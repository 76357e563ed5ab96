# tests/utils/test_k8s_utils.py

import logging
from decimal import Decimal

import pytest

from podcapacity.utils.k8s_utils import parse_cpu, parse_memory, parse_pod_count, parse_quantity


def test_parse_cpu_millicores():
    assert parse_cpu("250m") == 250
    assert parse_cpu("1500m") == 1500


def test_parse_cpu_whole_cores():
    assert parse_cpu("2") == 2000
    assert parse_cpu("1") == 1000


def test_parse_cpu_decimal_cores():
    assert parse_cpu("0.5") == 500
    assert parse_cpu("1.25") == 1250


def test_parse_cpu_none_is_zero_without_warning(caplog):
    with caplog.at_level(logging.WARNING):
        assert parse_cpu(None) == 0
    assert caplog.records == []


@pytest.mark.parametrize("value", ["bogus", "", "12x", "m", "nan", "-1"])
def test_parse_cpu_invalid_yields_zero_with_warning(value, caplog):
    with caplog.at_level(logging.WARNING, logger="podcapacity.utils.k8s_utils"):
        assert parse_cpu(value) == 0
    assert any("CPU quantity" in record.getMessage() for record in caplog.records)


def test_parse_memory_byte_sizes_are_binary():
    assert parse_memory("100mb") == 100 * 1024**2
    assert parse_memory("200MB") == 200 * 1024**2
    assert parse_memory("2gb") == 2 * 1024**3
    assert parse_memory("512KiB") == 512 * 1024
    assert parse_memory("64B") == 64


def test_parse_memory_kubernetes_quantities():
    assert parse_memory("2Gi") == 2 * 1024**3
    assert parse_memory("256Mi") == 268435456
    assert parse_memory("16310360Ki") == 16310360 * 1024
    assert parse_memory("500M") == 500_000_000
    assert parse_memory("1048576") == 1048576


def test_parse_memory_invalid_yields_zero_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="podcapacity.utils.k8s_utils"):
        assert parse_memory("lots") == 0
    assert any("memory quantity" in record.getMessage() for record in caplog.records)
    assert parse_memory(None) == 0


def test_parse_pod_count():
    assert parse_pod_count("110") == 110
    assert parse_pod_count(None) == 0
    assert parse_pod_count("many") == 0


def test_parse_quantity_suffixes():
    assert parse_quantity("1Ki") == Decimal(1024)
    assert parse_quantity("100m") == Decimal("0.1")
    assert parse_quantity("1k") == Decimal(1000)
    assert parse_quantity("1E3") == Decimal(1000)
    assert parse_quantity(None) == Decimal(0)


def test_parse_quantity_invalid_raises():
    with pytest.raises(ValueError):
        parse_quantity("abc")


@pytest.mark.parametrize("value", ["1e999999", "1e999999m", "9223372036854775808m", "1e30"])
def test_parse_cpu_out_of_range_yields_zero_with_warning(value, caplog):
    with caplog.at_level(logging.WARNING, logger="podcapacity.utils.k8s_utils"):
        assert parse_cpu(value) == 0
    assert any("CPU quantity" in record.getMessage() for record in caplog.records)


@pytest.mark.parametrize("value", ["1e999999Gi", "1e999999k", "99999999999999999999999EB", "1e9999999"])
def test_parse_memory_out_of_range_yields_zero_with_warning(value, caplog):
    with caplog.at_level(logging.WARNING, logger="podcapacity.utils.k8s_utils"):
        assert parse_memory(value) == 0
    assert any("memory quantity" in record.getMessage() for record in caplog.records)


def test_parse_pod_count_out_of_range():
    assert parse_pod_count("1e999999Ki") == 0


def test_parse_quantity_overflow_raises_value_error():
    with pytest.raises(ValueError):
        parse_quantity("1e999999Ei")
