"""Application services for fluidplan."""
