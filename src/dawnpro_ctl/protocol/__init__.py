"""Protocol layer: volume codec, command builders, and response parsing."""

from .commands import Attribute, build_get, build_set
from .parser import parse_status
from .volume import to_normal, to_raw
