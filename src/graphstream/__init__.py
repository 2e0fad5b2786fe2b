"""

Graph Streaming Connections

- StreamingEndpoint: the address of a graph stream, with optional basic auth credentials.
- Connector: opens a conduit to an endpoint. HttpConnector sends a streamed GET request,
  provisioning the trust store for https endpoints.
- Conduit: owns the live transport and provides the input stream. Closing the conduit
  shuts the transport down, which unblocks a read in progress.
- StreamReader: decodes the stream, reporting data received, errors and the end of the
  stream to a status listener.
- StreamingConnection: connects on creation, reads the stream on a background thread and
  relays the reader status to its StatusListeners.


## Threading

One background thread per connection runs the blocking read. Listeners are notified on
that thread, except for the closed notification that results from close(), which is sent
on the thread that closed the connection. Either way, a listener sees on_connection_closed()
exactly once and after every other notification.

There is no reconnection. A closed connection stays closed; to resume the stream, create a new
connection.
"""
