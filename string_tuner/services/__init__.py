"""Audio sources that feed frames to the tuner."""
