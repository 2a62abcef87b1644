"""vidshare - REST backend for a video-sharing platform."""
