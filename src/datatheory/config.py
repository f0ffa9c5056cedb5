"""Discovery configuration."""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MethodDisplay(str, Enum):
    """How test case display names are prefixed."""

    CLASS_AND_METHOD = "class_and_method"
    METHOD = "method"


class DiscoveryOptions(BaseSettings):
    """Options that steer theory discovery.

    Loads from environment variables automatically:
        DATATHEORY_PRE_ENUMERATE_THEORIES, DATATHEORY_METHOD_DISPLAY,
        DATATHEORY_DIAGNOSTIC_MESSAGES, DATATHEORY_TRACE_DISCOVERY

    Or pass values directly:

        options = DiscoveryOptions(pre_enumerate_theories=False)
    """

    pre_enumerate_theories: bool = Field(
        default=True,
        description="Expand theories into one case per data row at discovery time",
    )
    method_display: MethodDisplay = Field(
        default=MethodDisplay.CLASS_AND_METHOD,
        description="Whether display names include the declaring type",
    )
    diagnostic_messages: bool = Field(
        default=False,
        description="Print discovery diagnostics to the console instead of the log",
    )
    trace_discovery: bool = Field(
        default=False,
        description="Wrap each theory expansion in an OpenTelemetry span",
    )

    model_config = SettingsConfigDict(
        env_prefix="DATATHEORY_",
        extra="forbid",
        frozen=True,
    )
