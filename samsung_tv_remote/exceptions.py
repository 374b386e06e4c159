#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

class SamsungTvRemoteError(Exception):
    """Base class for all error exceptions defined by this package."""
    pass

class TransportError(SamsungTvRemoteError):
    """Connect, read or write failure on the TV connection, including timeouts
       and use of a closed session."""
    pass

class FramingError(SamsungTvRemoteError):
    """A frame received from the TV could not be decoded."""
    pass

class ConnectionClosedError(FramingError, TransportError):
    """The stream ended in the middle of a frame (the TV may have powered off)."""
    pass

class EncodingError(SamsungTvRemoteError):
    """A field is too long to be encoded in a frame."""
    pass

class ProtocolError(SamsungTvRemoteError):
    """A well-formed frame was received, but its content is not recognized."""
    pass
