"""Console presentation for the game tracker."""
