"""Graph operations for GitGud."""
