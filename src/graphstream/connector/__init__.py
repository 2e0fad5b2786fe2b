"""
The connector interfaces with a streaming endpoint. It validates the endpoint, performs the
handshake and provides the resulting conduit.

A connector can be thought of as a conduit factory that remembers the conduit it made.
"""
