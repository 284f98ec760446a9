"""Terminal multiplexer daemon toolkit: JSON-RPC protocol types, pane
classification, PID-file daemon management, a WebSocket client and a
status server command."""

__version__ = "0.1.0"