"""
Marshalling between store records and plain entities.
"""

from entitystore.codec.entity_codec import UNDEFINED, decode, encode

__all__ = ["UNDEFINED", "decode", "encode"]
