import os
import sys

sys.path.insert(1, os.path.join(sys.path[0], "../../.."))

from cubemeasure import config
from cubemeasure.config import get
from cubemeasure.config import parse_yaml
from cubemeasure.config import to_bool


def test_defaults():
    assert config.HLLC_DEFAULT_PRECISION == 14
    assert config.TOPN_DEFAULT_CAPACITY == 100
    assert config.EXTENDED_COLUMN_DEFAULT_LENGTH == 256
    assert config.EAGER_REGISTRY_INIT is True


def test_get_default_value():
    assert get("NON_EXISTENT_KEY", default="default_value") == "default_value"


def test_get_environment_first():
    os.environ["CUBEMEASURE_TEST_KEY"] = "from-environment"
    try:
        assert get("CUBEMEASURE_TEST_KEY", default="default") == "from-environment"
    finally:
        del os.environ["CUBEMEASURE_TEST_KEY"]


def test_to_bool():
    assert to_bool(True)
    assert to_bool("1")
    assert to_bool("TRUE")
    assert not to_bool("false")
    assert not to_bool("0")
    assert not to_bool("")
    assert not to_bool(None)
    assert not to_bool(0)


def test_parse_yaml_basic():
    yaml_str = """
    HLLC_DEFAULT_PRECISION: 12
    EAGER_REGISTRY_INIT: false
    RATIO: 0.5
    NAME: cube
    SIZES: [one, two, three]
    """
    assert parse_yaml(yaml_str) == {
        "HLLC_DEFAULT_PRECISION": 12,
        "EAGER_REGISTRY_INIT": False,
        "RATIO": 0.5,
        "NAME": "cube",
        "SIZES": ["one", "two", "three"],
    }


def test_parse_yaml_with_comments():
    yaml_str = """
    key1: value1 # this is a comment
    # this is a whole line comment
    key2: none
    """
    assert parse_yaml(yaml_str) == {"key1": "value1", "key2": None}


def test_parse_yaml_list_dash():
    yaml_str = """
    key:
      - item1
      - item2 # second item
    other: 1
    """
    assert parse_yaml(yaml_str) == {"key": ["item1", "item2"], "other": 1}


if __name__ == "__main__":  # pragma: no cover
    from tests.tools import run_tests

    run_tests()
