"""Daily scripture reading plan and weekly catechism tracker."""
