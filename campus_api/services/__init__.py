"""Services — async orchestration of queries and commits around core rules."""
