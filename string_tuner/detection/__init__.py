"""Signal analysis stages: silence gating and pitch estimation."""
