import io
import json

from gasprof.hierarchy import RootSource
from gasprof.profiler import DEFAULT_ROW_HEIGHT, GasProfiler, build_gas_profile, log_tree

DECODED = [
    {
        "signature": "swap(uint256,uint256)",
        "gasUsed": 90000,
        "children": [{"signature": "transfer(address,uint256)", "gasUsed": 30000}],
    }
]

RESPONSE = {"transaction": {"callTrace": [{"input": "0x12345678", "gasUsed": 21000}]}}


def test_profile_metrics():
    profile = build_gas_profile(DECODED, RESPONSE)
    assert profile.source is RootSource.DECODED
    assert profile.tree.id == "swap - 90000 GAS"
    assert profile.max_depth == 2
    assert profile.row_height == DEFAULT_ROW_HEIGHT
    assert profile.chart_height == 2 * DEFAULT_ROW_HEIGHT
    assert profile.total_gas == 90000


def test_custom_row_height():
    assert build_gas_profile(DECODED, row_height=25).chart_height == 50


def test_fallback_source():
    profile = build_gas_profile(None, RESPONSE)
    assert profile.source is RootSource.RAW
    assert profile.tree.id == "0x12345678 - 21000 GAS"


def test_empty_profile():
    profile = build_gas_profile(None, None)
    assert profile.source is RootSource.EMPTY
    assert profile.tree.to_dict() == {"id": "", "children": []}
    assert profile.max_depth == 1
    assert profile.total_gas == 0


def test_total_gas_sums_top_level_calls():
    profile = build_gas_profile([{"gasUsed": 10, "children": [{"gasUsed": 4}]}, {"gas": 5}])
    assert profile.total_gas == 15


def test_memoized_on_input_identity():
    profiler = GasProfiler()
    first = profiler.profile(DECODED, RESPONSE)
    assert profiler.profile(DECODED, RESPONSE) is first


def test_rebuilt_when_an_input_changes():
    profiler = GasProfiler()
    first = profiler.profile(DECODED, RESPONSE)
    copied = json.loads(json.dumps(DECODED))
    second = profiler.profile(copied, RESPONSE)
    assert second is not first
    assert second == first
    assert profiler.profile(copied, None) is not second


def test_reset_drops_cache():
    profiler = GasProfiler()
    first = profiler.profile(DECODED)
    profiler.reset()
    assert profiler.profile(DECODED) is not first


def test_on_tree_hook_called_per_build():
    seen = []
    profiler = GasProfiler(on_tree=seen.append)
    profiler.profile(DECODED)
    profiler.profile(DECODED)
    assert len(seen) == 1
    assert seen[0].id == "swap - 90000 GAS"


def test_log_tree_writes_json():
    stream = io.StringIO()
    profile = build_gas_profile(DECODED)
    log_tree(profile.tree, stream)
    output = stream.getvalue()
    assert "Icicle data:" in output
    payload = json.loads(output.split("Icicle data:", 1)[1])
    assert payload["children"][0] == {"id": "transfer - 30000 GAS", "value": 30000}


def test_fallback_warning_when_not_quiet(capsys):
    GasProfiler(quiet_mode=False).profile([], RESPONSE)
    assert "falling back to raw call trace" in capsys.readouterr().err


def test_quiet_by_default(capsys):
    GasProfiler().profile([], RESPONSE)
    assert capsys.readouterr().err == ""
