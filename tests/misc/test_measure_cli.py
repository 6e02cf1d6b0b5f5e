import os
import sys

sys.path.insert(1, os.path.join(sys.path[0], "../.."))

import orjson

from cubemeasure.__main__ import main
from cubemeasure.registry import BUILT_IN_DESCRIPTORS


def test_list_providers(capsys):
    assert main([]) == 0
    lines = capsys.readouterr().out.strip().split("\n")
    rows = [orjson.loads(line) for line in lines]
    assert len(rows) == len(BUILT_IN_DESCRIPTORS) + 1
    assert {"function": "TOP_N", "data_type": "topn", "kind": "TOPN", "serializer": "TOPN", "needs_rewrite": False} in rows


def test_describe_measure_type(capsys):
    assert main(["count_distinct", "hllc(10)"]) == 0
    description = orjson.loads(capsys.readouterr().out)
    assert description == {
        "function": "COUNT_DISTINCT",
        "data_type": "hllc(10)",
        "measure_type": "HLLCMeasureType",
        "needs_rewrite": True,
        "rewrite_function": "HLL_DISTINCT_COUNT",
        "rewrite_implementation": "HLLDistinctCountAggregateFunction",
    }


def test_describe_without_data_type(capsys):
    assert main(["TOP_N"]) == 0
    description = orjson.loads(capsys.readouterr().out)
    assert description["measure_type"] == "NeedsRewriteOnlyMeasureType"
    assert description["needs_rewrite"] is False
    assert description["data_type"] is None


def test_no_rewrite_variant(capsys):
    assert main(["--no-rewrite-variant", "COUNT_DISTINCT", "bigint"]) == 0
    description = orjson.loads(capsys.readouterr().out)
    assert description["measure_type"] == "DimCountDistinctMeasureType"
    assert description["rewrite_function"] == "DIM_DISTINCT_COUNT"
    assert description["rewrite_implementation"] == "DimDistinctCountAggregateFunction"


def test_errors_are_reported(capsys):
    assert main(["COUNT_DISTINCT", "hyperloglog"]) == 1
    assert "hyperloglog" in capsys.readouterr().err

    assert main(["--no-rewrite-variant", "SUM", "bigint"]) == 1
    assert "SUM" in capsys.readouterr().err


if __name__ == "__main__":  # pragma: no cover
    import pytest

    pytest.main([__file__])
