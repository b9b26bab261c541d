"""Domain models for areas, tasks and the task grid."""
