#!/usr/bin/env python3
"""
Main entry point for gasprof
"""

import argparse
import json
import sys
from typing import Any, Mapping, Optional

from eth_abi.exceptions import EncodingError

from .abi_utils import encode_function_call
from .colors import bold, depth_color, dim, error, info, number, rgb, warning
from .config import DEFAULT_CONFIG_FILE, ConfigError, ProfilerConfig
from .hierarchy import HierarchyNode, RootSource
from .json_serializer import ProfileSerializer
from .profiler import GasProfile, GasProfiler, log_tree
from .trace_fetcher import CallTraceFetcher, TraceFetchError


class TraceInputError(ValueError):
    """A trace input file is missing, unreadable or malformed."""


def load_json_file(path: str) -> Any:
    """Read a JSON trace or simulation response from disk."""
    try:
        with open(path) as f:
            return json.load(f)
    except OSError as e:
        raise TraceInputError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise TraceInputError(f"{path} is not valid JSON: {e}") from e


def select_bundle_result(response: Any, tx_index: Optional[int]) -> Any:
    """Pick one transaction's result out of a bundle simulation response."""
    if isinstance(response, Mapping) and isinstance(response.get('results'), list):
        results = response['results']
        index = tx_index or 0
        if not 0 <= index < len(results):
            raise TraceInputError(f"--tx-index {index} out of range: bundle has {len(results)} results")
        return results[index]
    if tx_index:
        raise TraceInputError("--tx-index given but the response has no results[] bundle")
    return response


def resolve_config(args) -> ProfilerConfig:
    """Config file values, overridden by command-line flags."""
    config = ProfilerConfig.from_config_file(args.config)
    settings = config.to_dict()
    if args.base_color is not None:
        settings['base_color'] = args.base_color
    if args.row_height is not None:
        settings['row_height'] = args.row_height
    if getattr(args, 'rpc', None):
        settings['rpc_url'] = args.rpc
    if args.log_tree is not None:
        settings['log_tree'] = args.log_tree
    config = ProfilerConfig(**settings)

    if args.save_config:
        config.save_to_config_file(args.config)
    return config


def _print_node(node: HierarchyNode, depth: int, base_color: str, total_gas: int):
    indent = "  " * depth
    if node.is_synthetic:
        print(f"{indent}{dim('(root)')}")
    else:
        share = node.value / total_gas * 100 if total_gas else 0.0
        label = rgb(node.id, depth_color(base_color, depth))
        print(f"{indent}#{node.key} {label} {dim(f'{share:.1f}%')}")
    for child in node.children or []:
        _print_node(child, depth + 1, base_color, total_gas)


def print_gas_profile(profile: GasProfile, base_color: str, title: str):
    """Print the gas tree with one line per call."""
    print(f"\n{bold('Gas Profile:')} {info(title)}")
    print(f"{dim('Source:')} {profile.source.value} call trace")
    print(f"{dim('Total gas:')} {number(str(profile.total_gas))}")
    print(f"{dim('Max depth:')} {number(str(profile.max_depth))} "
          f"{dim(f'(chart height {profile.chart_height}px)')}")

    print(f"\n{bold('Call Tree:')}")
    print(dim("-" * 60))
    if profile.source is RootSource.EMPTY:
        print(warning("No calls to profile"))
    else:
        _print_node(profile.tree, 0, base_color, profile.total_gas)
    print(dim("-" * 60))


def run_profile(decoded_trace: Any, response: Any, config: ProfilerConfig, args, title: str) -> int:
    """Profile the inputs and print the result in the requested format."""
    profiler = GasProfiler(
        row_height=config.row_height,
        on_tree=log_tree if config.log_tree else None,
        quiet_mode=args.json,
    )
    profile = profiler.profile(decoded_trace, response)

    if args.json:
        serializer = ProfileSerializer(config.base_color, include_paths=args.paths)
        print(json.dumps(serializer.serialize_profile(profile), indent=2))
    else:
        print_gas_profile(profile, config.base_color, title)
    return 0


def _fail(message: str) -> int:
    print(error(f"Error: {message}"), file=sys.stderr)
    return 1


def profile_command(args) -> int:
    """Execute the profile command."""
    if not args.decoded and not args.response:
        return _fail("provide --decoded, --response or both")

    try:
        config = resolve_config(args)
        decoded_trace = load_json_file(args.decoded) if args.decoded else None
        response = load_json_file(args.response) if args.response else None
        response = select_bundle_result(response, args.tx_index)
    except (TraceInputError, ConfigError) as e:
        return _fail(str(e))

    return run_profile(decoded_trace, response, config, args, args.decoded or args.response)


def trace_command(args) -> int:
    """Execute the trace command."""
    try:
        config = resolve_config(args)
        fetcher = CallTraceFetcher(config.rpc_url, quiet_mode=args.json)
        response = fetcher.trace_transaction(args.tx_hash)
    except (ConfigError, ConnectionError, TraceFetchError) as e:
        return _fail(str(e))

    return run_profile(None, response, config, args, args.tx_hash)


def simulate_command(args) -> int:
    """Execute the simulate command."""
    # If --raw-data is provided, do not provide function_signature or function_args
    if args.raw_data:
        if args.function_signature or args.function_args:
            return _fail("when using --raw-data, do not provide function_signature or function_args")
    elif not args.function_signature:
        return _fail("provide a function signature or --raw-data")

    try:
        config = resolve_config(args)
        if args.raw_data:
            calldata = args.raw_data
        else:
            calldata = encode_function_call(args.function_signature, args.function_args)
        fetcher = CallTraceFetcher(config.rpc_url, quiet_mode=args.json)
        response = fetcher.trace_call(
            args.contract_address,
            args.from_addr,
            calldata,
            block=args.block,
            value=args.value,
        )
    except (ValueError, SyntaxError, EncodingError, ConnectionError, TraceFetchError) as e:
        return _fail(str(e))

    title = f"{args.contract_address} {args.function_signature or calldata[:10]}"
    return run_profile(None, response, config, args, title)


def main(argv=None):
    parser = argparse.ArgumentParser(description='gasprof - Gas profiles of EVM call traces')
    parser.add_argument('--version', '-v', action='version', version='%(prog)s 0.1.0')

    # Options shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--json', action='store_true', help='Output the profile as JSON for web app consumption')
    common.add_argument('--paths', action='store_true', help='Include the call path of every node in JSON output')
    common.add_argument('--base-color', default=None, help='Chart base color, e.g. #17BEBB')
    common.add_argument('--row-height', type=int, default=None, help='Chart pixels per call depth level (default: 40)')
    common.add_argument('--log-tree', action='store_true', default=None, help='Dump the built tree to stderr')
    common.add_argument('--config', default=DEFAULT_CONFIG_FILE, help=f'Config file (default: {DEFAULT_CONFIG_FILE})')
    common.add_argument('--save-config', action='store_true', help='Save the effective configuration to the config file')

    # Create subparsers for different commands
    subparsers = parser.add_subparsers(dest='command', help='Commands')
    subparsers.required = True

    # Create the 'profile' subcommand
    profile_parser = subparsers.add_parser('profile', parents=[common], help='Profile traces stored in JSON files')
    profile_parser.add_argument('--decoded', '-d', help='Decoded call trace JSON (list, {"root": ...} or a single node)')
    profile_parser.add_argument('--response', '-s', help='Simulation response JSON carrying transaction.callTrace')
    profile_parser.add_argument('--tx-index', type=int, default=None, help='Result to profile in a bundle response (default: 0)')

    # Create the 'trace' subcommand
    trace_parser = subparsers.add_parser('trace', parents=[common], help='Profile a mined transaction')
    trace_parser.add_argument('tx_hash', help='Transaction hash to trace')
    trace_parser.add_argument('--rpc', '-r', default=None, help='RPC URL')

    # Create the 'simulate' subcommand
    simulate_parser = subparsers.add_parser('simulate', parents=[common], help='Profile a simulated call')
    simulate_parser.add_argument('contract_address', help='Contract address (0x...)')
    simulate_parser.add_argument('function_signature', nargs='?', help='Function signature, e.g. increment(uint256)')
    simulate_parser.add_argument('function_args', nargs='*', help='Arguments for the function')
    simulate_parser.add_argument('--from', dest='from_addr', required=True, help='Sender address')
    simulate_parser.add_argument('--block', type=int, default=None, help='Block number (default: latest)')
    simulate_parser.add_argument('--value', type=int, default=0, help='ETH value to send (in wei)')
    simulate_parser.add_argument('--raw-data', dest='raw_data', default=None, help='Raw calldata to send (hex string, 0x...)')
    simulate_parser.add_argument('--rpc', '-r', default=None, help='RPC URL')

    args = parser.parse_args(argv)

    # Handle commands
    if args.command == 'profile':
        return profile_command(args)
    elif args.command == 'trace':
        return trace_command(args)
    elif args.command == 'simulate':
        return simulate_command(args)

    return 0


if __name__ == '__main__':
    sys.exit(main())
