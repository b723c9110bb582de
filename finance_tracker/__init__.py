"""Weekly debt and savings planner."""
