"""
The conduit package provides an abstraction of the live transport to a streaming endpoint.
The concrete implementation is a streamed http response.
"""
