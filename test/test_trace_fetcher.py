from unittest import mock

import pytest
from hexbytes import HexBytes

from gasprof.trace_fetcher import (
    CALL_TRACER_CONFIG,
    CallTraceFetcher,
    TraceFetchError,
    simulation_response,
)

CALL_RESULT = {
    "type": "CALL",
    "input": HexBytes("0xa9059cbb"),
    "gasUsed": "0x5208",
    "calls": [{"type": "STATICCALL", "input": "0x70a08231", "gasUsed": "0xa28"}],
}


@pytest.fixture
def web3_mock():
    with mock.patch("gasprof.trace_fetcher.Web3") as web3_cls:
        w3 = web3_cls.return_value
        w3.is_connected.return_value = True
        w3.manager.request_blocking.return_value = CALL_RESULT
        yield w3


def test_connection_failure(web3_mock):
    web3_mock.is_connected.return_value = False
    with pytest.raises(ConnectionError):
        CallTraceFetcher("http://nowhere:8545")


def test_trace_transaction(web3_mock):
    fetcher = CallTraceFetcher(quiet_mode=True)
    response = fetcher.trace_transaction("abcd")
    web3_mock.manager.request_blocking.assert_called_once_with(
        "debug_traceTransaction", ["0xabcd", CALL_TRACER_CONFIG]
    )
    assert response["transaction"]["hash"] == "0xabcd"
    call_trace = response["transaction"]["callTrace"]
    assert call_trace[0]["input"] == "0xa9059cbb"
    assert call_trace[0]["calls"][0]["gasUsed"] == "0xa28"


def test_trace_transaction_failure(web3_mock, capsys):
    web3_mock.manager.request_blocking.side_effect = ValueError("method not found")
    fetcher = CallTraceFetcher()
    with pytest.raises(TraceFetchError, match="method not found"):
        fetcher.trace_transaction("0xabcd")
    assert "debug_traceTransaction not available" in capsys.readouterr().err


def test_trace_call(web3_mock):
    fetcher = CallTraceFetcher(quiet_mode=True)
    response = fetcher.trace_call(
        "0x000000000000000000000000000000000000dead",
        "0x000000000000000000000000000000000000beef",
        "a9059cbb",
        block=16,
        value=5,
    )
    method, params = web3_mock.manager.request_blocking.call_args[0]
    assert method == "debug_traceCall"
    call_obj, block_param, tracer_config = params
    assert call_obj["to"] == "0x000000000000000000000000000000000000dEaD"
    assert call_obj["data"] == "0xa9059cbb"
    assert call_obj["value"] == "0x5"
    assert block_param == "0x10"
    assert tracer_config == CALL_TRACER_CONFIG
    assert response["transaction"]["from"] == call_obj["from"]
    assert len(response["transaction"]["callTrace"]) == 1


def test_trace_call_defaults_to_latest(web3_mock):
    CallTraceFetcher(quiet_mode=True).trace_call(
        "0x000000000000000000000000000000000000dead",
        "0x000000000000000000000000000000000000beef",
        "0x",
    )
    _, params = web3_mock.manager.request_blocking.call_args[0]
    assert params[1] == "latest"


def test_simulation_response_without_trace():
    assert simulation_response(None, hash="0x01") == {"transaction": {"hash": "0x01", "callTrace": []}}
