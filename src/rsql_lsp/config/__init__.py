from .loader import load_config, merge_overrides, parse_config
from .models import (
    DetectionConfigModel,
    DiagnosticsConfigModel,
    FormattingConfigModel,
    ParsingLimitsModel,
    ServerConfigModel,
)

__all__ = [
    "DetectionConfigModel",
    "DiagnosticsConfigModel",
    "FormattingConfigModel",
    "ParsingLimitsModel",
    "ServerConfigModel",
    "load_config",
    "merge_overrides",
    "parse_config",
]
