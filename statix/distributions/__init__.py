"""Named distributions and regression models."""
