"""Parser and dispatch wiring for stagegate_cli."""
