"""Graph algorithm visualizer: services and platform."""
