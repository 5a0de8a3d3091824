"""Application constants."""

# Podiums: gold, silver, bronze
PODIUM_SIZE = 3

# Session status thresholds (minutes)
EXCEEDED_MARGIN_MINUTES = 60  # duration >= target + margin → exceeded
UNTARGETED_GOAL_MINUTES = 60  # sessions without a target count as met from here
