"""Core reconciliation logic for Clock Kanban."""
