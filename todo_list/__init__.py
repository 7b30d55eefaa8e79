"""Neon To-Do: task API, console client and task agent."""
