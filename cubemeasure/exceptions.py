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
Bespoke error types for cubemeasure, shaped after the error structure defined in
PEP-0249 so they sit alongside the errors of the engine that consumes them.

Exception Hierarchy:

Exception
 └── Error [PEP-0249] *
     └── DatabaseError [PEP-0249] *
         ├── InvalidConfigurationError
         │   ├── InvalidMeasureDeclarationError
         │   └── MeasureConsensusError
         ├── InvalidInternalStateError
         ├── NotSupportedError
         ├── UnsupportedTypeError
         └── ProgrammingError [PEP-0249] *
             ├── DataTypeNotFoundError
             ├── IncorrectTypeError
             └── MeasureNotFoundError

All of these describe static configuration or programming errors, none of them
are transient and none of them should be retried.
"""

from typing import Iterable
from typing import Optional


# ======================== Begin PEP-0249 Exceptions ========================
# These should not be thrown directly
class Error(Exception):
    """
    https://www.python.org/dev/peps/pep-0249/
    Exception that is the base class of all other error exceptions. You can use this to
    catch all errors with one single except statement.
    """


class DatabaseError(Error):
    """
    https://www.python.org/dev/peps/pep-0249/
    Exception raised for errors that are related to the database. It must be a subclass
    of Error.
    """


class ProgrammingError(DatabaseError):
    """
    https://www.python.org/dev/peps/pep-0249/
    Exception raised for programming errors, e.g. an unknown type or function name.
    """


# ======================== End PEP-0249 Exceptions ==========================


# ======================== Begin Lookup Errors ========================
class DataTypeNotFoundError(ProgrammingError):
    """Exception raised when a data type name is not known to the data type registry."""

    def __init__(self, data_type: str = None, suggestion: Optional[str] = None):
        self.data_type = data_type
        self.suggestion = suggestion

        message = f"Data type '{data_type}' does not exist."
        if suggestion is not None:
            message += f" Did you mean '{suggestion}'?"
        super().__init__(message)


class MeasureNotFoundError(ProgrammingError):
    """Exception raised when no measure type can be built for a function."""

    def __init__(self, function: str = None, message: str = None):
        self.function = function
        if message is None:
            message = f"No measure type found for function '{function}'."
        super().__init__(message)


class IncorrectTypeError(ProgrammingError):
    """Exception raised when a value of the wrong shape is given to a measure."""


# ======================== End Lookup Errors ==========================


# ======================== Begin Configuration & Internal Errors ========================
class InvalidConfigurationError(DatabaseError):
    """Exception raised for invalid configuration."""

    def __init__(
        self,
        *,
        config_item: str,
        provided_value: str,
        valid_value_description: str = None,
        message: str = None,
    ):
        DISPLAY_LIMIT: int = 32

        self.config_item = config_item
        self.provided_value = provided_value
        self.valid_value_description = valid_value_description

        if message is None:
            value = str(provided_value)
            message = f"Value of '{value[:DISPLAY_LIMIT]}{'...' if len(value) > DISPLAY_LIMIT else ''}' for '{config_item}' is not valid."
            if valid_value_description:
                message += f" Value should be {valid_value_description}"
        super().__init__(message)


class InvalidMeasureDeclarationError(InvalidConfigurationError):
    """
    Raised during registry initialization when a measure provider declares a
    function name which is not upper case or a data type name which is not
    lower case.
    """

    def __init__(self, *, config_item: str, provided_value: str, provider: str = None):
        self.provider = provider
        case = "upper" if config_item == "function_name" else "lower"
        message = f"Aggregation {config_item.replace('_', ' ')} '{provided_value}' must be in {case} case"
        if provider:
            message += f" (declared by {provider})"
        super().__init__(
            config_item=config_item,
            provided_value=provided_value,
            valid_value_description=f"in {case} case",
            message=message + ".",
        )


class MeasureConsensusError(InvalidConfigurationError):
    """
    Raised when the providers of a function disagree on whether the measure needs
    rewriting, which is the only question which can be answered before the data
    type of a measure is known.
    """

    def __init__(self, function: str, providers: Iterable):
        self.function = function
        self.providers = list(providers)
        names = ", ".join(str(provider) for provider in self.providers)
        super().__init__(
            config_item="needs_rewrite",
            provided_value=function,
            message=f"Measure providers for '{function}' do not have consensus on needs_rewrite: {names}.",
        )


class InvalidInternalStateError(DatabaseError):
    """Exception raised for invalid internal states."""


class NotSupportedError(DatabaseError):
    """Exception raised when an unsupported operation is attempted."""


class UnsupportedTypeError(DatabaseError):
    """Exception raised when an unsupported type is encountered."""


# ======================== End Configuration & Internal Errors ==========================
