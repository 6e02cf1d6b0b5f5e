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

from difflib import get_close_matches
from itertools import permutations
from typing import Iterable
from typing import Optional


def suggest_alternative(value: str, candidates: Iterable[str]) -> Optional[str]:
    """
    Find the closest match for a name which wasn't found, used to add a
    'did you mean' to lookup errors.

    This implementation:
    - Is case insensitive and ignores non-alphanumeric characters.
    - Tries rearranging parts of the name if a close match is not found in its
      original form.

    Parameters:
        value: str
            The value to find matches for.
        candidates: Iterable[str]
            The candidate names to match against.

    Returns:
        Optional[str]: The best match found, or None if no match is found.
    """

    def _clean(name: str) -> str:
        return "".join(char for char in name if char.isalnum()).lower()

    lookup = {}
    for candidate in candidates:
        lookup.setdefault(_clean(candidate), candidate)

    names = [value]
    # rearranging long names is factorial, four parts is 24 attempts
    if "_" in value and value.count("_") < 4:
        names.extend("_".join(combination) for combination in permutations(value.split("_")))

    for name in names:
        matches = get_close_matches(_clean(name), lookup.keys(), n=1, cutoff=0.75)
        if matches:
            return lookup[matches[0]]
    return None
