"""HTTP/WebSocket server for streaming bounding boxes."""
