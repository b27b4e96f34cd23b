"""
Call Trace Fetcher

Fetches raw call traces from an Ethereum JSON-RPC node with geth's
callTracer and wraps them in the simulation-response shape that the gas
profiler falls back to when no decoded trace is available.
"""

import sys
from typing import Any, Dict, Optional

from eth_utils import to_checksum_address
from web3 import Web3

from .colors import info, warning
from .json_serializer import to_serializable

CALL_TRACER_CONFIG = {"tracer": "callTracer", "tracerConfig": {"onlyTopCall": False}}


class TraceFetchError(RuntimeError):
    """The node could not produce a call trace."""


def simulation_response(call_trace: Any, **transaction_fields: Any) -> Dict[str, Any]:
    """Wrap a callTracer result as {"transaction": {..., "callTrace": [...]}}."""
    transaction = dict(transaction_fields)
    transaction["callTrace"] = [to_serializable(call_trace)] if call_trace else []
    return {"transaction": transaction}


class CallTraceFetcher:
    """
    Traces transactions and calls through debug_traceTransaction and
    debug_traceCall.
    """

    def __init__(self, rpc_url: str = "http://localhost:8545", quiet_mode: bool = False):
        self.rpc_url = rpc_url
        self.w3 = Web3(Web3.HTTPProvider(rpc_url))
        if not self.w3.is_connected():
            raise ConnectionError(f"Failed to connect to {rpc_url}")
        self.quiet_mode = quiet_mode

    def _log(self, message: str):
        """Log a message to stderr if not in quiet mode."""
        if not self.quiet_mode:
            print(message, file=sys.stderr)

    def trace_transaction(self, tx_hash: str) -> Dict[str, Any]:
        """Call trace of a mined transaction, as a simulation response."""
        # Ensure tx_hash is properly formatted
        if isinstance(tx_hash, str) and not tx_hash.startswith('0x'):
            tx_hash = '0x' + tx_hash

        self._log(info(f"Tracing transaction {tx_hash}..."))
        try:
            trace_result = self.w3.manager.request_blocking(
                "debug_traceTransaction",
                [tx_hash, CALL_TRACER_CONFIG]
            )
        except Exception as e:
            self._log(warning(f"debug_traceTransaction not available: {e}"))
            raise TraceFetchError(f"debug_traceTransaction failed for {tx_hash}: {e}") from e

        return simulation_response(trace_result, hash=tx_hash)

    def trace_call(self, to: str, from_: str, calldata: str,
                   block: Optional[int] = None, value: int = 0) -> Dict[str, Any]:
        """Call trace of a simulated call, as a simulation response."""
        call_obj = {
            'to': to_checksum_address(to),
            'from': to_checksum_address(from_),
            'data': calldata if calldata.startswith("0x") else "0x" + calldata,
            'value': hex(value) if isinstance(value, int) else value
        }
        block_param = 'latest' if block is None else hex(block)

        self._log(info(f"Simulating call to {call_obj['to']} at block {block_param}..."))
        try:
            trace_result = self.w3.manager.request_blocking(
                "debug_traceCall",
                [call_obj, block_param, CALL_TRACER_CONFIG]
            )
        except Exception as e:
            self._log(warning(f"debug_traceCall not available: {e}"))
            raise TraceFetchError(f"debug_traceCall failed: {e}") from e

        return simulation_response(trace_result, to=call_obj['to'], **{'from': call_obj['from']})
