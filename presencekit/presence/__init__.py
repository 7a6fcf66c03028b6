from .events import EventEmitter
from .resolver import ConfigResolver, gen_random, merge_config, resolve_config
from .schema import FIELD_SPECS, LIST_FIELDS, validate_config
from .sinks import DiscordPresenceSink, PresenceSink, build_activity

__all__ = [
    "ConfigResolver",
    "DiscordPresenceSink",
    "EventEmitter",
    "FIELD_SPECS",
    "LIST_FIELDS",
    "PresenceSink",
    "build_activity",
    "gen_random",
    "merge_config",
    "resolve_config",
    "validate_config",
]
