#!/usr/bin/env python

# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# See the License at http://www.apache.org/licenses/LICENSE-2.0
# Distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND.

"""
A command line interface for cubemeasure

    cubemeasure                          list the registered measure providers
    cubemeasure COUNT_DISTINCT hllc(10)  describe the measure type for a function and data type
    cubemeasure COUNT_DISTINCT           ask only whether the function is rewritten
"""

import argparse
import sys

import orjson

import cubemeasure
from cubemeasure.exceptions import Error
from cubemeasure.rewrite import get_rewrite_function

# Define ANSI color codes
ANSI_RED = "\u001b[31m"
ANSI_RESET = "\u001b[0m"


def describe(measure_type) -> dict:
    description = {
        "function": measure_type.function_name,
        "data_type": None if measure_type.data_type is None else str(measure_type.data_type),
        "measure_type": measure_type.__class__.__name__,
        "needs_rewrite": measure_type.needs_rewrite(),
    }
    if measure_type.data_type is not None and measure_type.needs_rewrite():
        rewrite_function = measure_type.get_rewrite_aggregate_function()
        description["rewrite_function"] = rewrite_function.name
        description["rewrite_implementation"] = get_rewrite_function(rewrite_function).__name__
    return description


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="A command line interface for cubemeasure")
    parser.add_argument("function", type=str, nargs="?", help="Aggregation function name.")
    parser.add_argument("data_type", type=str, nargs="?", help="Measure return data type.")
    parser.add_argument(
        "--no-rewrite-variant",
        dest="no_rewrite",
        action="store_true",
        default=False,
        help="Resolve the variant without rewrite fields (COUNT_DISTINCT only).",
    )
    parser.add_argument("--version", action="version", version=cubemeasure.__version__)

    args = parser.parse_args(argv)

    try:
        if args.function is None:
            table = cubemeasure.default_resolver().catalogue()
            for row in table.to_pylist():
                sys.stdout.write(orjson.dumps(row).decode() + "\n")
            return 0

        if args.no_rewrite:
            measure_type = cubemeasure.resolve_no_rewrite_variant(args.function, args.data_type)
        else:
            measure_type = cubemeasure.resolve(args.function, args.data_type)
        sys.stdout.write(orjson.dumps(describe(measure_type), option=orjson.OPT_INDENT_2).decode() + "\n")
    except Error as err:
        print(f"{ANSI_RED}Error{ANSI_RESET}: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
