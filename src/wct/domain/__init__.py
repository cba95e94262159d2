"""Domain models for the active game tracker."""
