# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Configuration is read from environment variables first, then from an optional
`cubemeasure.yaml` file in the current working directory, then the defaults
below are used.
"""

import logging
import typing
from os import environ
from pathlib import Path

logger = logging.getLogger(__name__)

_config_values: dict = {}

# we need a preliminary version of this variable
_CUBEMEASURE_DEBUG = environ.get("CUBEMEASURE_DEBUG") is not None


def parse_yaml(yaml_str):
    """
    Parse the small subset of YAML used by the configuration file: scalar
    values, inline lists and dash lists.
    """

    def line_value(value):
        value = value.strip()
        if value.isdigit():
            value = int(value)
        elif value.replace(".", "", 1).isdigit():
            value = float(value)
        elif value.lower() == "true":
            return True
        elif value.lower() == "false":
            return False
        elif value.lower() == "none":
            return None
        elif value.startswith("["):
            return [val.strip() for val in value[1:-1].split(",")]
        return value

    result: dict = {}
    list_key = None
    for line in yaml_str.strip().split("\n"):
        # remove comments
        line = line.split("#")[0].strip()
        if not line:
            continue
        if list_key is not None:
            if line.startswith("- "):
                result[list_key].append(line[2:].strip())
                continue
            list_key = None
        key, value = line.split(":", 1)
        key = key.strip()
        if not value.strip():
            list_key = key
            result[key] = []
        else:
            result[key] = line_value(value)
    return result


def to_bool(value: typing.Any) -> bool:
    """Environment variables are strings, so 'false' and '0' need to be falsy."""
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no", "off", "none")
    return bool(value)


try:  # pragma: no cover
    _config_path = Path(".") / "cubemeasure.yaml"
    if _config_path.exists():
        with open(_config_path, "r") as _config_file:
            _config_values = parse_yaml(_config_file.read())
        if _CUBEMEASURE_DEBUG:
            logger.info("Loading config from %s", _config_path)
except (OSError, ValueError) as exception:  # pragma: no cover
    # it doesn't matter why - just use the defaults
    if _CUBEMEASURE_DEBUG:
        logger.warning("Config file %s not used - %s", _config_path, exception)


def get(key, default=None):
    value = environ.get(key)
    if value is None:
        value = _config_values.get(key, default)
    return value


# fmt:off

# verbose loader and registry output
CUBEMEASURE_DEBUG: bool = to_bool(get("CUBEMEASURE_DEBUG", False))
# register the built-in measure providers when the default resolver is first created
EAGER_REGISTRY_INIT: bool = to_bool(get("EAGER_REGISTRY_INIT", True))
# precision of 'hllc' when the data type has no argument, 2^p registers
HLLC_DEFAULT_PRECISION: int = int(get("HLLC_DEFAULT_PRECISION", 14))
# number of items kept by 'topn' when the data type has no argument
TOPN_DEFAULT_CAPACITY: int = int(get("TOPN_DEFAULT_CAPACITY", 100))
# maximum bytes held by 'extendedcolumn' when the data type has no argument
EXTENDED_COLUMN_DEFAULT_LENGTH: int = int(get("EXTENDED_COLUMN_DEFAULT_LENGTH", 256))

# fmt:on
