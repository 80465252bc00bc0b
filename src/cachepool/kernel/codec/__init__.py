"""Kernel codec – payload encoding for cached values."""
from cachepool.kernel.codec.codec import Codec, JsonCodec, Payload, PickleCodec, codec_for

__all__ = ["Codec", "JsonCodec", "Payload", "PickleCodec", "codec_for"]
