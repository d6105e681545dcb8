"""tasklist - a small persistent task list."""
